import pytest

from cx_pageobject.engine.command_wrapper import WrappedCommand
from cx_pageobject.engine.exceptions import ConfigurationError, DuplicateCommandError
from cx_pageobject.engine.locate_strategy import DriverSession
from cx_pageobject.engine.models import CommandKind, CommandSpec, Page, Section
from cx_pageobject.engine.registrar import (
    AssertionNamespace,
    add_wrapped_commands,
    add_wrapped_commands_recursively,
)


def test_commands_are_attached_to_the_page(page, catalog):
    add_wrapped_commands(page, catalog)

    assert isinstance(page.click, WrappedCommand)
    assert page.click.kind is CommandKind.PLAIN
    assert page.click.container is page
    assert isinstance(page.expect, AssertionNamespace)
    assert set(page.expect) == {"visible", "section"}
    assert page.expect.visible.kind is CommandKind.EXPECT


def test_loader_is_called_once_with_empty_catalog(page, mocker):
    loader = mocker.Mock(return_value={"click": mocker.Mock()})

    add_wrapped_commands(page, loader)

    loader.assert_called_once_with({})


def test_plain_mapping_is_accepted(page, driver):
    add_wrapped_commands(page, {"click": driver.click})

    assert page.click("@submitButton") is page


def test_end_to_end_click_chains(page, driver, catalog):
    add_wrapped_commands(page, catalog)

    page.click("@submitButton").getText("@heading")
    driver.drain()

    assert driver.executed == [
        ("click", "#submit", "css selector"),
        ("get_text", "//h1", "xpath"),
    ]
    assert driver.locate_strategy == "xpath"


def test_expect_returns_result_not_page(page, catalog):
    """expect-style assertions hand back their own result instead of chaining."""
    add_wrapped_commands(page, catalog)

    result = page.expect.visible("@submitButton")

    assert result == {"assertion": "visible", "selector": "#submit"}
    assert result is not page


def test_expect_section(page, catalog):
    add_wrapped_commands(page, catalog)

    assert page.expect.section("@menu") == {"assertion": "present", "selector": "#menu"}


def test_assert_namespace_chains_and_has_alias(page, driver, catalog):
    add_wrapped_commands(page, catalog)

    namespace = getattr(page, "assert")
    assert page.assert_ is namespace
    assert namespace.visible("@heading", "Heading shown") is page
    driver.drain()
    assert driver.executed == [("assert_visible", "//h1", "xpath")]


def test_command_spec_entries_keep_callback_position(page, mocker):
    command = mocker.Mock()
    add_wrapped_commands(
        page, {"custom": CommandSpec(fn=command, callback_position=1)}
    )

    assert page.custom.spec.name == "custom"
    assert page.custom.spec.callback_position == 1


def test_duplicate_command_is_rejected(page, driver, mocker):
    first = mocker.Mock()
    add_wrapped_commands(page, {"click": first})
    original = page.click

    with pytest.raises(DuplicateCommandError, match='The command "click" is already defined!'):
        add_wrapped_commands(page, {"click": mocker.Mock()})

    assert page.click is original
    assert driver.error_count == 1
    assert len(driver.error_log) == 1
    page.click("@submitButton")
    first.assert_called_once_with("#submit")


def test_duplicate_assertion_is_rejected(page, driver, mocker):
    add_wrapped_commands(page, {"expect": {"visible": mocker.Mock()}})
    namespace = page.expect

    with pytest.raises(DuplicateCommandError):
        add_wrapped_commands(page, {"expect": {"visible": mocker.Mock()}})

    assert page.expect is namespace
    assert driver.error_count == 1


def test_assertion_namespace_is_reused(page, mocker):
    add_wrapped_commands(page, {"verify": {"visible": mocker.Mock()}})
    namespace = getattr(page, "verify")

    add_wrapped_commands(page, {"verify": {"present": mocker.Mock()}})

    assert getattr(page, "verify") is namespace
    assert list(namespace) == ["visible", "present"]
    assert "present" in namespace


def test_command_named_after_existing_attribute_is_rejected(page, mocker):
    with pytest.raises(DuplicateCommandError):
        add_wrapped_commands(page, {"elements": mocker.Mock()})


@pytest.mark.parametrize("name", ["selector", "parent", "root", "add_element"])
def test_command_cannot_shadow_unset_tree_fields(page, driver, mocker, name):
    """Fields that are None still belong to the page, so they are not free slots."""
    click = mocker.Mock()
    add_wrapped_commands(page, {"click": click})

    with pytest.raises(DuplicateCommandError, match=f'"{name}" is already defined'):
        add_wrapped_commands(page, {name: mocker.Mock()})

    assert not isinstance(getattr(page, name), WrappedCommand)
    assert driver.error_count == 1
    page.click("@submitButton")
    click.assert_called_once_with("#submit")
    assert driver.pending == ["use_css", "use_xpath"]


def test_section_without_selector_keeps_its_parent_link(page, mocker):
    menu = page.sections["menu"]
    menu.add_section(Section(name="bare"))
    bare = menu.sections["bare"]

    with pytest.raises(DuplicateCommandError):
        add_wrapped_commands(bare, {"parent": mocker.Mock(), "selector": mocker.Mock()})

    assert bare.parent is menu
    assert bare.root is page


def test_assertion_cannot_shadow_namespace_internals(page, mocker):
    with pytest.raises(DuplicateCommandError):
        add_wrapped_commands(page, {"expect": {"_attach": mocker.Mock()}})


def test_namespace_key_clashing_with_command_is_rejected(page, mocker):
    page.expect = mocker.Mock()

    with pytest.raises(DuplicateCommandError):
        add_wrapped_commands(page, {"expect": {"visible": mocker.Mock()}})


def test_non_callable_command_is_a_configuration_error(page):
    with pytest.raises(ConfigurationError, match='"click" must be callable'):
        add_wrapped_commands(page, {"click": "not a function"})


def test_namespace_value_must_be_mapping(page, mocker):
    with pytest.raises(ConfigurationError, match="assertion namespace"):
        add_wrapped_commands(page, {"expect": mocker.Mock()})


def test_page_without_driver_needs_a_session(mocker):
    page = Page(name="detached")

    with pytest.raises(ConfigurationError, match="driver"):
        add_wrapped_commands(page, {"click": mocker.Mock()})

    session = DriverSession(mocker.Mock())
    add_wrapped_commands(page, {"click": mocker.Mock()}, session=session)
    assert page.click.session is session


def test_recursive_registration_reaches_nested_sections(page, driver, catalog):
    add_wrapped_commands_recursively(page, catalog)

    menu = page.sections["menu"]
    submenu = menu.sections["submenu"]
    assert page.click.session is submenu.click.session

    assert submenu.click("@button") is submenu
    assert menu.expect.visible("@help")["selector"][-1].selector == ".help"
    driver.drain()
    chain = driver.executed[0][1]
    assert [node.selector for node in chain] == ["#menu", ".submenu", "button.deep"]
    assert driver.executed[0][2] == "recursion"
    assert driver.locate_strategy == "xpath"


def test_custom_sigil_from_settings(page, mocker):
    from cx_pageobject.config import Settings

    command = mocker.Mock()
    add_wrapped_commands(page, {"click": command}, settings=Settings(sigil="$"))

    page.click("$submitButton")
    page.click("@submitButton")

    assert command.call_args_list == [mocker.call("#submit"), mocker.call("@submitButton")]
