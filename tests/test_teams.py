import unittest
from collections import Counter

from sqlalchemy import func, select

from leaguedraw.models import Draw, Group, Team
from leaguedraw.storage import TeamRepository
from leaguedraw.storage.seed import SEED_COUNTRIES, seed_rows

from support import memory_sessionmaker


class SeedRosterTests(unittest.TestCase):
    def test_seed_has_32_teams_over_8_countries(self):
        rows = seed_rows()
        self.assertEqual(len(rows), 32)
        self.assertEqual(len({name for name, _, _ in rows}), 32)
        self.assertEqual(Counter(country for _, country, _ in rows), Counter({c: 4 for c in SEED_COUNTRIES}))
        self.assertIn(("Adesso İstanbul", "Türkiye", "İstanbul"), rows)


class TeamRepositoryTests(unittest.TestCase):
    def setUp(self):
        self.engine, self.Session = memory_sessionmaker()
        self.repository = TeamRepository(self.Session)

    def tearDown(self):
        self.engine.dispose()

    def test_ensure_teams_exist_seeds_once(self):
        self.assertTrue(self.repository.ensure_teams_exist())
        self.assertFalse(self.repository.ensure_teams_exist())
        with self.Session() as session:
            self.assertEqual(session.scalar(select(func.count(Team.id))), 32)

    def test_existing_teams_are_left_alone(self):
        with self.Session.begin() as session:
            session.add(Team("Local FC", "Testland", "Testville"))

        self.assertFalse(self.repository.ensure_teams_exist())
        teams = self.repository.get_all_teams()
        self.assertEqual([t.name for t in teams], ["Local FC"])

    def test_get_all_teams_returns_detached_results(self):
        self.repository.ensure_teams_exist()
        teams = self.repository.get_all_teams()
        self.assertEqual(len(teams), 32)
        self.assertEqual(teams[0].name, "Adesso İstanbul")
        self.assertEqual(teams[0].country, "Türkiye")
        self.assertEqual(teams[0].city, "İstanbul")

    def test_get_teams_by_country(self):
        self.repository.ensure_teams_exist()
        spanish = self.repository.get_teams_by_country("İspanya")
        self.assertEqual(
            [t.city for t in spanish], ["Sevilla", "Madrid", "Barselona", "Granada"]
        )
        self.assertEqual(self.repository.get_teams_by_country("Atlantis"), [])


class DrawModelTests(unittest.TestCase):
    def setUp(self):
        self.engine, self.Session = memory_sessionmaker()
        TeamRepository(self.Session).ensure_teams_exist()

    def tearDown(self):
        self.engine.dispose()

    def test_group_members_keep_draw_order(self):
        with self.Session.begin() as session:
            berlin = Team.get_by_name(session, "Adesso Berlin")
            paris = Team.get_by_name(session, "Adesso Paris")
            draw = Draw(drawn_by="Alice", number_of_groups=4)
            group = Group("A")
            group.add_team(paris)
            group.add_team(berlin)
            draw.groups.append(group)
            session.add(draw)
            session.flush()
            draw_id = draw.id

        with self.Session() as session:
            draw = session.get(Draw, draw_id)
            self.assertEqual([t.name for t in draw.groups[0].teams], ["Adesso Paris", "Adesso Berlin"])
            self.assertEqual([gt.position for gt in draw.groups[0].group_teams], [0, 1])
            self.assertIsNotNone(draw.created_at)

    def test_get_by_name_missing(self):
        with self.Session() as session:
            self.assertIsNone(Team.get_by_name(session, "Nobody FC"))


if __name__ == "__main__":
    unittest.main()
