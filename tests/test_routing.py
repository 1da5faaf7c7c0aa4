"""Tests for the path, label and selector conventions."""

import pytest

from ecosystem_e2e.routing import (
    APP_REF_PLACEHOLDER,
    DEFAULT_ENV,
    app_label,
    app_path,
    is_placeholder_text,
    nav_link_selector,
)


@pytest.mark.parametrize("env", ["dev", "staging", "prod", "pr-1234"])
def test_app_path_is_environment_scoped(env):
    assert app_path(env, "app1") == f"/{env}/app1"


def test_default_environment_is_dev():
    assert DEFAULT_ENV == "dev"
    assert app_path(DEFAULT_ENV, "app1") == "/dev/app1"


@pytest.mark.parametrize("env, app", [("", "app1"), ("dev", ""), ("  ", "app1"), ("dev/x", "app1"), ("dev", "a/b")])
def test_app_path_rejects_bad_segments(env, app):
    with pytest.raises(ValueError):
        app_path(env, app)


def test_nav_link_selector_targets_data_app_attribute():
    assert nav_link_selector("app2") == 'nav a[data-app="app2"]'


@pytest.mark.parametrize(
    "app, label",
    [("app1", "App 1"), ("app2", "App 2"), ("app12", "App 12"), ("billing", "Billing"), ("user-admin", "User Admin")],
)
def test_app_label(app, label):
    assert app_label(app) == label


@pytest.mark.parametrize("text", [None, "", "   ", "-", " - "])
def test_placeholder_texts(text):
    assert is_placeholder_text(text)


@pytest.mark.parametrize("text", ["localhost:5180", "/dev/app1", "dev"])
def test_real_values_are_not_placeholders(text):
    assert not is_placeholder_text(text)


def test_ref_placeholder_token():
    assert APP_REF_PLACEHOLDER == "__APP_REF__"
