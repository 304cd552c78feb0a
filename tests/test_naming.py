"""Tests for filename templating."""

from datetime import datetime

import pytest

from dbsnapshot.errors import TemplateError
from dbsnapshot.naming import check_name, render

NOW = datetime(2024, 1, 1, 9, 30, 15)


class TestRender:
    def test_date_token(self):
        assert render("backup-{date}.sql", NOW) == "backup-2024-01-01.sql"

    def test_time_and_datetime_tokens(self):
        assert render("{time}.sql", NOW) == "093015.sql"
        assert render("db-{datetime}.sql", NOW) == "db-20240101-093015.sql"

    def test_strftime_format_spec(self):
        assert render("snapshot-{now:%Y%m%d%H%M%S}.sql", NOW) == "snapshot-20240101093015.sql"

    def test_timestamp_token(self):
        assert render("{timestamp}.sql", NOW) == f"{int(NOW.timestamp())}.sql"

    def test_literal_template(self):
        assert render("nightly.sql", NOW) == "nightly.sql"

    def test_escaped_braces_render_literally(self):
        assert render("{{db}}-{date}.sql", NOW) == "{db}-2024-01-01.sql"

    def test_caller_variables(self):
        assert render("{env}-{date}.sql", NOW, env="prod") == "prod-2024-01-01.sql"

    def test_deterministic(self):
        template = "snap-{now:%Y%m%d%H%M%S}.sql"
        assert render(template, NOW) == render(template, NOW)

    @pytest.mark.parametrize("template", ["{timestamp}.sql", "{datetime}.sql", "{now:%Y%m%d%H%M%S}"])
    def test_distinct_times_give_distinct_names(self, template):
        later = datetime(2024, 1, 1, 9, 30, 16)
        assert render(template, NOW) != render(template, later)

    def test_unknown_variable(self):
        with pytest.raises(TemplateError, match="Unknown template variable 'nope'"):
            render("{nope}.sql", NOW)

    def test_unbalanced_brace(self):
        with pytest.raises(TemplateError, match="Malformed"):
            render("backup-{date.sql", NOW)

    def test_positional_field(self):
        with pytest.raises(TemplateError):
            render("backup-{}.sql", NOW)

    def test_path_separator_rejected(self):
        with pytest.raises(TemplateError, match="path separator"):
            render("{date}/backup.sql", NOW)

    def test_empty_result_rejected(self):
        with pytest.raises(TemplateError):
            render("   ", NOW)


class TestCheckName:
    def test_valid(self):
        assert check_name("manual.sql") == "manual.sql"

    @pytest.mark.parametrize("name", ["", ".", "..", "../etc/passwd", "a\\b.sql"])
    def test_invalid(self, name):
        with pytest.raises(TemplateError):
            check_name(name)
