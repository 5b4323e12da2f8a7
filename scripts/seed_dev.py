from datetime import datetime, timedelta, timezone

from leaguedraw.db.engine import get_sessionmaker, make_engine
from leaguedraw.draw import SystemRandomSource
from leaguedraw.events import LoggingEventPublisher
from leaguedraw.models import Base
from leaguedraw.service import DrawService
from leaguedraw.storage import SqlDrawRepository, TeamRepository


def main() -> None:
    """Reset the development database and fill it with a few sample draws."""
    engine = make_engine()

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    # Spread the sample draws over the last few days so listings show an order.
    now = datetime.now(timezone.utc)
    stamps = iter([now - timedelta(days=2), now - timedelta(days=1), now])

    service = DrawService(
        TeamRepository(Session),
        SqlDrawRepository(Session),
        LoggingEventPublisher(),
        random_source=SystemRandomSource(seed=2024),
        clock=lambda: next(stamps),
    )
    for drawn_by, groups in (("Alice", 4), ("Bob", 8), ("Carol", 4)):
        draw = service.create_draw(drawn_by, groups)
        print(f"Draw #{draw.id} by {draw.drawn_by}:")
        for group in draw.groups:
            print(f"  {group.group_name}: {', '.join(t.name for t in group.teams)}")


if __name__ == "__main__":
    main()
