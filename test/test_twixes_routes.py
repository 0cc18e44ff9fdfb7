#!/usr/bin/env python

from datetime import datetime, timedelta
from unittest import main
from unittest.mock import patch
from urllib.parse import unquote

from basic_test_case import BasicTestCase

from sqlalchemy.exc import IntegrityError

from twixel.models import User
from twixel.routes.twixes import get_layout_data


class TwixesTestCase(BasicTestCase):
    def setUp(self):
        super().setUp()
        self.owner = self.create_user("kody", "twixrox")
        self.other = self.create_user("voxel", "voxel123")

    def logged_in_client(self, username: str, password: str):
        client = self.new_client()
        response = self.login(client, username, password)
        self.assertEqual(response.status_code, 303)
        return client


class TestLatestTwixes(TwixesTestCase):
    def test_newest_first(self):
        now = datetime.utcnow()
        a = self.create_twix(self.owner, title="Twix A", created_at=now - timedelta(minutes=5))
        b = self.create_twix(self.owner, title="Twix B", created_at=now)

        async def _load():
            async with self.session_factory() as db:
                return await get_layout_data(user=None, db=db)

        data = self.run_async(_load())
        self.assertIsNone(data["user"])
        self.assertEqual(data["twix_list_items"], [
            {"id": b.id, "title": "Twix B"},
            {"id": a.id, "title": "Twix A"},
        ])

    def test_truncated_to_five(self):
        now = datetime.utcnow()
        for i in range(7):
            self.create_twix(self.owner, title=f"Twix {i}", created_at=now + timedelta(minutes=i))

        response = self.client.get("/twixes")
        self.assertEqual(response.status_code, 200)
        sidebar = response.text.split('id="twix-list"', 1)[1].split("</ul>", 1)[0]
        positions = [sidebar.find(f"Twix {i}") for i in (6, 5, 4, 3, 2)]
        self.assertNotIn(-1, positions)
        self.assertEqual(positions, sorted(positions))
        self.assertNotIn("Twix 1", sidebar)
        self.assertNotIn("Twix 0", sidebar)

    def test_header_greets_user(self):
        client = self.logged_in_client("kody", "twixrox")
        self.create_twix(self.owner)
        response = client.get("/twixes")
        self.assertIn("Hi kody", response.text)
        self.assertIn('action="/logout"', response.text)


class TestRandomTwix(TwixesTestCase):
    def test_no_twixes(self):
        response = self.client.get("/twixes")
        self.assertEqual(response.status_code, 404)
        self.assertIn("There are no twixes to display.", response.text)

    def test_single_twix(self):
        twix = self.create_twix(self.owner, title="Frisbee", content="It was getting bigger, then it hit me.")
        response = self.client.get("/twixes")
        self.assertEqual(response.status_code, 200)
        self.assertIn("It was getting bigger, then it hit me.", response.text)
        self.assertIn(f'href="/twixes/{twix.id}" class="my-4', response.text)

    def test_random_offset(self):
        now = datetime.utcnow()
        self.create_twix(self.owner, title="First", content="content of the first", created_at=now)
        self.create_twix(self.owner, title="Second", content="content of the second", created_at=now + timedelta(seconds=1))

        with patch("twixel.routes.twixes.random.randrange", return_value=1) as randrange:
            response = self.client.get("/twixes")
        randrange.assert_called_once_with(2)
        self.assertIn("content of the second", response.text)


class TestNewTwix(TwixesTestCase):
    def test_form_requires_login(self):
        response = self.client.get("/twixes/new")
        self.assertEqual(response.status_code, 401)
        self.assertIn('href="/login"', response.text)

    def test_form(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.get("/twixes/new")
        self.assertEqual(response.status_code, 200)
        self.assertIn('id="new-twix-form"', response.text)

    def test_post_requires_login(self):
        response = self.client.post("/twixes/new", data={"title": "Hello", "content": "Hello there world"})
        self.assertEqual(response.status_code, 303)
        location = response.headers["location"]
        self.assertTrue(location.startswith("/login?redirectTo="))
        self.assertEqual(unquote(location.split("=", 1)[1]), "/twixes/new")
        self.assertEqual(self.count_twixes(), 0)

    def test_create(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/new", data={"title": "Hello", "content": "Hello there world"})
        self.assertEqual(response.status_code, 303)
        twix_id = response.headers["location"].rsplit("/", 1)[1]
        self.assertEqual(response.headers["location"], f"/twixes/{twix_id}")

        twix = self.get_twix(twix_id)
        self.assertEqual(twix.title, "Hello")
        self.assertEqual(twix.content, "Hello there world")
        self.assertEqual(twix.twixester_id, self.owner.id)

    def test_short_title(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/new", data={"title": "Hi", "content": "Hello there world"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("title is too short", response.text)
        self.assertIn('id="title-error"', response.text)
        self.assertNotIn('id="content-error"', response.text)
        self.assertIn("Hello there world", response.text)
        self.assertEqual(self.count_twixes(), 0)

    def test_short_content(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/new", data={"title": "Hello", "content": "Too short"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("That twix is too short", response.text)
        self.assertIn('id="content-error"', response.text)
        self.assertEqual(self.count_twixes(), 0)

    def test_blank_title(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/new", data={"title": "", "content": "Hello there world"})
        self.assertEqual(response.status_code, 400)
        self.assertIn('id="title-error"', response.text)
        self.assertNotIn("Form not submitted correctly.", response.text)
        self.assertIn("Hello there world", response.text)
        self.assertEqual(self.count_twixes(), 0)

    def test_blank_content(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/new", data={"title": "Hello", "content": ""})
        self.assertEqual(response.status_code, 400)
        self.assertIn('id="content-error"', response.text)
        self.assertNotIn("Form not submitted correctly.", response.text)
        self.assertEqual(self.count_twixes(), 0)

    def test_removed_user_is_sent_to_login(self):
        client = self.logged_in_client("kody", "twixrox")
        self.delete_user(self.owner)

        response = client.post("/twixes/new", data={"title": "Hello", "content": "Hello there world"})
        self.assertEqual(response.status_code, 303)
        self.assertTrue(response.headers["location"].startswith("/login?redirectTo="))
        self.assertEqual(self.count_twixes(), 0)

        # The feed still renders for everyone else
        self.assertEqual(self.client.get("/twixes.rss").status_code, 200)

    def test_twixester_must_exist(self):
        with self.assertRaises(IntegrityError):
            self.create_twix(User(id="no-such-user", username="ghost", password_hash=""))
        self.assertEqual(self.count_twixes(), 0)

    def test_missing_field(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/new", data={"title": "Hello"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Form not submitted correctly.", response.text)
        self.assertEqual(self.count_twixes(), 0)


class TestTwixDetail(TwixesTestCase):
    def test_missing(self):
        response = self.client.get("/twixes/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertIn("What is does-not-exist?", response.text)

    def test_owner_sees_delete(self):
        twix = self.create_twix(self.owner, title="Trees", content="They're just a bit shady.")
        client = self.logged_in_client("kody", "twixrox")
        response = client.get(f"/twixes/{twix.id}")
        self.assertEqual(response.status_code, 200)
        self.assertIn('name="_method" value="delete"', response.text)
        self.assertIn(f'href="/twixes/{twix.id}" class="my-4', response.text)

    def test_others_do_not_see_delete(self):
        twix = self.create_twix(self.owner, title="Trees", content="They're just a bit shady.")
        for client in (self.client, self.logged_in_client("voxel", "voxel123")):
            response = client.get(f"/twixes/{twix.id}")
            self.assertEqual(response.status_code, 200)
            self.assertIn("Trees", response.text)
            self.assertNotIn('name="_method"', response.text)


class TestDeleteTwix(TwixesTestCase):
    def test_owner_deletes(self):
        twix = self.create_twix(self.owner)
        client = self.logged_in_client("kody", "twixrox")
        response = client.post(f"/twixes/{twix.id}", data={"_method": "delete"})
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/twixes")
        self.assertIsNone(self.get_twix(twix.id))

    def test_non_owner_is_refused(self):
        twix = self.create_twix(self.owner)
        client = self.logged_in_client("voxel", "voxel123")
        response = client.post(f"/twixes/{twix.id}", data={"_method": "delete"})
        self.assertEqual(response.status_code, 401)
        self.assertIn("is not your twix", response.text)
        self.assertIsNotNone(self.get_twix(twix.id))

    def test_anonymous_is_sent_to_login(self):
        twix = self.create_twix(self.owner)
        response = self.client.post(f"/twixes/{twix.id}", data={"_method": "delete"})
        self.assertEqual(response.status_code, 303)
        self.assertTrue(response.headers["location"].startswith("/login?redirectTo="))
        self.assertIsNotNone(self.get_twix(twix.id))

    def test_missing_twix(self):
        client = self.logged_in_client("kody", "twixrox")
        response = client.post("/twixes/does-not-exist", data={"_method": "delete"})
        self.assertEqual(response.status_code, 404)

    def test_unsupported_method(self):
        twix = self.create_twix(self.owner)
        client = self.logged_in_client("kody", "twixrox")
        for data in ({"_method": "put"}, {}):
            response = client.post(f"/twixes/{twix.id}", data=data)
            self.assertEqual(response.status_code, 400)
        self.assertIsNotNone(self.get_twix(twix.id))


if __name__ == "__main__":
    main()
