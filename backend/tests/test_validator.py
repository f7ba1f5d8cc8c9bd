"""
Portfolio Backend — Validator Unit Tests
==========================================

What we test:
    ✅ Create: required fields, length bounds on trimmed text, URL format,
       integer order, defaults for omitted optional fields
    ✅ Create: every violation reported at once
    ✅ Update: only present, well-typed fields become changes
    ✅ Project id parsing
"""

from uuid import uuid4

import pytest

from app.services.validator import (
    Validator,
    is_well_formed_url,
    parse_project_id,
)


def fields_of(errors):
    return [e["field"] for e in errors]


class TestValidateCreate:

    def setup_method(self):
        self.validator = Validator()

    def test_minimal_payload_gets_defaults(self):
        payload, errors = self.validator.validate_create({
            "title": "  Hi  ",
            "description": "0123456789",
        })

        assert errors == []
        assert payload.title == "Hi"
        assert payload.tech == []
        assert payload.github_url == ""
        assert payload.demo_url == ""
        assert payload.featured is False
        assert payload.order == 0

    def test_full_payload_is_normalized(self):
        payload, errors = self.validator.validate_create({
            "title": "Portfolio",
            "description": "A personal portfolio website.",
            "tech": "React, Node",
            "githubUrl": "https://github.com/me/portfolio",
            "demoUrl": "https://me.dev",
            "featured": "true",
            "order": "3",
        })

        assert errors == []
        assert payload.tech == ["React", "Node"]
        assert payload.github_url == "https://github.com/me/portfolio"
        assert payload.demo_url == "https://me.dev"
        assert payload.featured is True
        assert payload.order == 3

    def test_missing_required_fields(self):
        payload, errors = self.validator.validate_create({})

        assert payload is None
        assert errors == [
            {"field": "title", "message": "title is required"},
            {"field": "description", "message": "description is required"},
        ]

    def test_title_length_measured_after_trim(self):
        _, errors = self.validator.validate_create({
            "title": "  A  ",
            "description": "0123456789",
        })
        assert errors == [
            {"field": "title", "message": "title must be between 2 and 120 characters"}
        ]

    def test_length_boundaries(self):
        _, ok = self.validator.validate_create({
            "title": "x" * 120,
            "description": "d" * 3000,
        })
        _, too_long = self.validator.validate_create({
            "title": "x" * 121,
            "description": "d" * 3001,
        })

        assert ok == []
        assert fields_of(too_long) == ["title", "description"]

    def test_non_string_title(self):
        _, errors = self.validator.validate_create({"title": 42, "description": "0123456789"})
        assert errors == [{"field": "title", "message": "title must be a string"}]

    def test_all_violations_reported_together(self):
        _, errors = self.validator.validate_create({
            "title": "A",
            "description": "short",
            "githubUrl": "not a url",
            "demoUrl": "ftp//broken",
            "order": "first",
        })
        assert fields_of(errors) == ["title", "description", "githubUrl", "demoUrl", "order"]

    @pytest.mark.parametrize("url", ["", None, "   "])
    def test_blank_url_means_not_set(self, url):
        payload, errors = self.validator.validate_create({
            "title": "Hi",
            "description": "0123456789",
            "demoUrl": url,
        })
        assert errors == []
        assert payload.demo_url == ""

    def test_scheme_less_url_is_stored_as_sent(self):
        payload, errors = self.validator.validate_create({
            "title": "Hi",
            "description": "0123456789",
            "githubUrl": "  github.com/me/portfolio ",
        })
        assert errors == []
        assert payload.github_url == "github.com/me/portfolio"

    @pytest.mark.parametrize("order", ["3000000000", 2 ** 31, -(2 ** 31) - 1])
    def test_order_outside_int32_rejected(self, order):
        payload, errors = self.validator.validate_create({
            "title": "Hi",
            "description": "0123456789",
            "order": order,
        })
        assert payload is None
        assert errors == [{
            "field": "order",
            "message": "order must be between -2147483648 and 2147483647",
        }]

    @pytest.mark.parametrize("order", [2 ** 31 - 1, -(2 ** 31)])
    def test_order_int32_limits_accepted(self, order):
        payload, errors = self.validator.validate_create({
            "title": "Hi",
            "description": "0123456789",
            "order": order,
        })
        assert errors == []
        assert payload.order == order

    def test_blank_order_uses_default(self):
        payload, errors = self.validator.validate_create({
            "title": "Hi",
            "description": "0123456789",
            "order": "",
        })
        assert errors == []
        assert payload.order == 0


class TestValidateUpdate:

    def setup_method(self):
        self.validator = Validator()

    def test_empty_update_has_no_changes(self):
        changes, errors = self.validator.validate_update({})
        assert errors == []
        assert changes.changes() == {}

    def test_only_present_fields_are_changes(self):
        changes, errors = self.validator.validate_update({"title": " New title ", "featured": "0"})

        assert errors == []
        assert changes.changes() == {"title": "New title", "featured": False}

    def test_bad_text_is_a_violation(self):
        changes, errors = self.validator.validate_update({"title": "x"})
        assert changes is None
        assert fields_of(errors) == ["title"]

    def test_bad_url_is_a_violation(self):
        _, errors = self.validator.validate_update({"githubUrl": "nope"})
        assert errors == [{"field": "githubUrl", "message": "githubUrl must be a valid URL"}]

    def test_empty_url_clears_link(self):
        changes, errors = self.validator.validate_update({"demoUrl": ""})
        assert errors == []
        assert changes.changes() == {"demo_url": ""}

    def test_null_url_is_ignored(self):
        changes, _ = self.validator.validate_update({"demoUrl": None})
        assert changes.changes() == {}

    def test_non_integer_order_is_ignored(self):
        changes, errors = self.validator.validate_update({"order": "soon"})
        assert errors == []
        assert changes.changes() == {}

    def test_out_of_range_order_is_ignored(self):
        changes, errors = self.validator.validate_update({"order": "3000000000"})
        assert errors == []
        assert changes.changes() == {}

    def test_tech_list_replaces(self):
        changes, _ = self.validator.validate_update({"tech": ["Go", " ", "Rust"]})
        assert changes.changes() == {"tech": ["Go", "Rust"]}

    def test_empty_tech_list_clears(self):
        changes, _ = self.validator.validate_update({"tech": []})
        assert changes.changes() == {"tech": []}

    @pytest.mark.parametrize("value", [7, "   ", None])
    def test_unusable_tech_is_ignored(self, value):
        changes, errors = self.validator.validate_update({"tech": value})
        assert errors == []
        assert changes.changes() == {}


class TestHelpers:

    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://me.dev:3000/x?y=1",
        "github.com/me/portfolio",
        "www.example.co.uk",
        "ftp://files.example.org/a.zip",
        "HTTPS://Example.com",
        "http://192.168.0.10/demo",
    ])
    def test_well_formed_urls(self, url):
        assert is_well_formed_url(url)

    @pytest.mark.parametrize("url", [
        "example",
        "://x",
        "http://localhost:3000",
        "//cdn.example.com/x",
        "gopher://example.org",
        "example.c0m",
        "exa mple.com",
        "https://bad_host.example.com",
        "http://" + "a" * 2100 + ".com",
    ])
    def test_malformed_urls(self, url):
        assert not is_well_formed_url(url)

    def test_parse_project_id(self):
        pid = uuid4()
        assert parse_project_id(str(pid)) == pid
        assert parse_project_id(pid) == pid

    @pytest.mark.parametrize("value", ["abc", "", "123", None, 5])
    def test_parse_project_id_rejects_malformed(self, value):
        assert parse_project_id(value) is None
