from collections import deque

import pytest

from cx_pageobject._bootstrap import bootstrap_models
from cx_pageobject.engine.models import Element, Page, Section


@pytest.fixture(scope="session", autouse=True)
def bootstrap_pydantic_models():
    """Ensures the recursive definition models are resolved once for the entire test suite."""
    bootstrap_models()


class QueuedDriver:
    """
    A stand-in for the automation driver. Every primitive is appended to a
    FIFO queue and only runs on `drain()`, the way the real driver defers its
    commands. With `immediate=True` everything runs at call time instead.
    """

    def __init__(self, locate_strategy="css selector", immediate=False):
        self.locate_strategy = locate_strategy
        self.error_count = 0
        self.error_log = []
        self.immediate = immediate
        self.queue = deque()
        self.executed = []

    def _enqueue(self, label, action):
        if self.immediate:
            action()
        else:
            self.queue.append((label, action))

    @property
    def pending(self):
        return [label for label, _ in self.queue]

    def drain(self):
        while self.queue:
            _label, action = self.queue.popleft()
            action()

    def _set(self, strategy):
        def action():
            self.locate_strategy = strategy

        return action

    def use_css(self):
        self._enqueue("use_css", self._set("css selector"))

    def use_xpath(self):
        self._enqueue("use_xpath", self._set("xpath"))

    def use_recursion(self):
        self._enqueue("use_recursion", self._set("recursion"))

    def click(self, selector, callback=None):
        def action():
            self.executed.append(("click", selector, self.locate_strategy))
            if callback is not None:
                callback({"status": 0})

        self._enqueue("click", action)
        return self

    def get_text(self, selector, callback=None):
        def action():
            self.executed.append(("get_text", selector, self.locate_strategy))
            if callback is not None:
                callback({"status": 0, "value": "Sign in"})

        self._enqueue("get_text", action)
        return self

    def wait_for_element_visible(self, selector, timeout, callback=None, message=None):
        def action():
            self.executed.append(
                ("wait_for_element_visible", selector, self.locate_strategy)
            )
            if callback is not None:
                callback({"status": 0, "timeout": timeout})

        self._enqueue("wait_for_element_visible", action)
        return self

    def navigate(self, url):
        self._enqueue("navigate", lambda: self.executed.append(("navigate", url, None)))
        return self

    def expect_visible(self, selector):
        return {"assertion": "visible", "selector": selector}

    def expect_present(self, selector):
        return {"assertion": "present", "selector": selector}

    def assert_visible(self, selector, message=None):
        self._enqueue(
            "assert_visible",
            lambda: self.executed.append(("assert_visible", selector, self.locate_strategy)),
        )
        return self


@pytest.fixture
def driver() -> QueuedDriver:
    """A queued driver whose strategy starts at xpath, so switches are visible."""
    return QueuedDriver(locate_strategy="xpath")


@pytest.fixture
def immediate_driver() -> QueuedDriver:
    return QueuedDriver(locate_strategy="xpath", immediate=True)


def make_login_page(client) -> Page:
    """
    login (page)
      submitButton  '#submit'           css
      heading       '//h1'              xpath
      row           dynamic             css
      menu (section '#menu')
        help        '.help'             css
        submenu (section '.submenu')
          button    'button.deep'       css
    """
    page = Page(name="login", client=client)
    page.add_element(Element(name="submitButton", selector="#submit"))
    page.add_element(Element(name="heading", selector="//h1", locate_strategy="xpath"))
    page.add_element(
        Element(name="row", selector=lambda index, column: f"tr:nth-child({index}) td.{column}")
    )
    menu = page.add_section(Section(name="menu", selector="#menu"))
    menu.add_element(Element(name="help", selector=".help"))
    submenu = menu.add_section(Section(name="submenu", selector=".submenu"))
    submenu.add_element(Element(name="button", selector="button.deep"))
    return page


@pytest.fixture
def page(driver) -> Page:
    return make_login_page(driver)


@pytest.fixture
def immediate_page(immediate_driver) -> Page:
    return make_login_page(immediate_driver)


def driver_catalog(client):
    """A command loader wired to the driver's bound methods."""

    def loader(commands):
        commands.update(
            {
                "click": client.click,
                "getText": client.get_text,
                "waitForElementVisible": client.wait_for_element_visible,
                "url": client.navigate,
                "expect": {
                    "visible": client.expect_visible,
                    "section": client.expect_present,
                },
                "assert": {"visible": client.assert_visible},
            }
        )
        return commands

    return loader


@pytest.fixture
def catalog(driver):
    return driver_catalog(driver)


@pytest.fixture
def immediate_catalog(immediate_driver):
    return driver_catalog(immediate_driver)
