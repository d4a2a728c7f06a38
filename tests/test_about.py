"""Tests for about page resolution."""

import pytest
from cratesite.core.about import (
    ABOUT_NOT_FOUND_TITLE,
    ErrorPage,
    TemplateRef,
    about_page,
    resolve_about_page,
)
from cratesite.errors import NotFoundError


class TestResolveAboutPage:
    """Tests for resolve_about_page()."""

    @pytest.mark.parametrize("name", ["about", "index"])
    def test__index_aliases__resolve_to_index(self, name: str) -> None:
        assert resolve_about_page(name) == TemplateRef(
            template="core/about/index.html", active_tab="index"
        )

    @pytest.mark.parametrize("name", ["badges", "metadata", "redirections", "download"])
    def test__known_page__resolves_to_own_template(self, name: str) -> None:
        page = resolve_about_page(name)

        assert page.template == f"core/about/{name}.html"
        assert page.active_tab == name

    @pytest.mark.parametrize("name", ["missing", "Badges", "", "../index"])
    def test__unknown_page__raises_not_found(self, name: str) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            resolve_about_page(name)

        assert exc_info.value.title == ABOUT_NOT_FOUND_TITLE
        assert exc_info.value.message is not None
        assert "creating" in exc_info.value.message


class TestAboutPage:
    """Tests for about_page()."""

    def test__unknown_page__returns_error_page(self) -> None:
        page = about_page("nope")

        assert isinstance(page, ErrorPage)
        assert page.title == ABOUT_NOT_FOUND_TITLE
        assert page.status == 404

    def test__known_page__returns_template(self) -> None:
        assert about_page("badges") == resolve_about_page("badges")
