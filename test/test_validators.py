#!/usr/bin/env python

from datetime import datetime, timedelta, timezone
from unittest import TestCase, main

from basic_test_case import BasicTestCase  # noqa: F401 (sets up the test environment)

from twixel.utils.text import escape_cdata, escape_html, format_rss_date, get_domain_url
from twixel.utils.validators import (
    validate_password,
    validate_twix_content,
    validate_twix_title,
    validate_username,
)


class TestFormValidators(TestCase):
    def test_username(self):
        self.assertIsNone(validate_username("kody"))
        self.assertIsNone(validate_username("abc"))
        self.assertEqual(
            validate_username("ab"), "Usernames must be at least 3 characters long"
        )

    def test_password(self):
        self.assertIsNone(validate_password("twixrox"))
        self.assertIsNone(validate_password("123456"))
        self.assertEqual(
            validate_password("12345"), "Passwords must be at least 6 characters long"
        )

    def test_twix_title(self):
        self.assertIsNone(validate_twix_title("Hey"))
        self.assertIsNotNone(validate_twix_title("Hi"))
        self.assertIsNotNone(validate_twix_title(""))

    def test_twix_content(self):
        self.assertIsNone(validate_twix_content("0123456789"))
        self.assertIsNotNone(validate_twix_content("012345678"))


class TestRssText(TestCase):
    def test_escape_cdata(self):
        self.assertEqual(escape_cdata("plain"), "plain")
        self.assertEqual(escape_cdata("a]]>b]]>c"), "a]]]]><![CDATA[>b]]]]><![CDATA[>c")
        # Lone brackets are legal inside CDATA
        self.assertEqual(escape_cdata("a]] > b"), "a]] > b")

    def test_escape_html(self):
        self.assertEqual(
            escape_html("<a href=\"x\">Tom & 'Jerry'</a>"),
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#039;Jerry&#039;&lt;/a&gt;",
        )
        # & first, so entities are not escaped twice
        self.assertEqual(escape_html("&lt;"), "&amp;lt;")

    def test_format_rss_date(self):
        self.assertEqual(
            format_rss_date(datetime(2024, 1, 2, 3, 4, 5)),
            "Tue, 02 Jan 2024 03:04:05 GMT",
        )
        aware = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(format_rss_date(aware), "Tue, 02 Jan 2024 03:04:05 GMT")

    def test_domain_url_prefers_forwarded_host(self):
        headers = {"x-forwarded-host": "twixel.example", "host": "internal:8000"}
        self.assertEqual(get_domain_url(headers), "https://twixel.example")

    def test_domain_url_from_host(self):
        self.assertEqual(get_domain_url({"host": "twixel.example"}), "https://twixel.example")
        self.assertEqual(get_domain_url({"host": "localhost:8000"}), "http://localhost:8000")

    def test_domain_url_without_host(self):
        with self.assertRaises(ValueError):
            get_domain_url({})


if __name__ == "__main__":
    main()
