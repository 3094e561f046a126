from schooldash.navigation import dashboard_for, menu_for
from schooldash.pages.dashboard import DashboardPage
from schooldash.services.auth import AuthService
from schooldash.services.messages import AnalyticsService
from schooldash.state.session import SessionContext
from schooldash.views.blocks import card, column, empty_state, table, text
from schooldash.views.dashboard import overview
from schooldash.views.render import render_text


def test_admin_menu_has_management_entries():
    labels = [item.label for item in menu_for("admin")]
    assert labels[0] == "Dashboard"
    assert {"Teachers", "Parents", "Students", "Academics", "Financial"} <= set(labels)
    assert labels[-1] == "Settings"


def test_non_admin_menus_hide_management_entries():
    teacher = [item.label for item in menu_for("teacher")]
    assert "Attendance" in teacher
    assert "Teachers" not in teacher and "Financial" not in teacher

    assert [item.label for item in menu_for(None)] == ["Dashboard", "Announcements", "Feedback", "Settings"]


def test_dashboard_for_role():
    assert dashboard_for("parent") == "parent_dashboard"
    assert dashboard_for("janitor") is None


def test_collapsed_card_renders_without_children():
    blocks = [
        card("9th", subtitle="2 sections", expanded=True, children=[text("Section A")]),
        card("10th", expanded=False, children=[text("hidden")]),
        table("Subjects", [column("name", "Subject"), column("code", "Code")], [{"name": "Biology", "code": "BIO9"}]),
        empty_state("No subjects yet", "Add one"),
    ]

    out = render_text(blocks)

    assert "v 9th  (2 sections)" in out
    assert "  Section A" in out
    assert "> 10th" in out
    assert "hidden" not in out
    assert "Biology | BIO9" in out
    assert "No subjects yet - Add one" in out


async def test_admin_dashboard_overview(http):
    auth = AuthService(http)
    session = SessionContext(auth)
    await session.login("admin@school.test", "secret")
    page = DashboardPage(session, AnalyticsService(http))

    await page.load()

    items = overview(page)[0]["items"]
    assert [i["label"] for i in items] == ["Total Students", "Total Teachers", "Attendance Rate"]
    await page.close()


async def test_dashboard_error_block(http):
    auth = AuthService(http)
    session = SessionContext(auth)
    await session.login("teach@school.test", "secret")
    page = DashboardPage(session, AnalyticsService(http))

    await page.load()

    assert overview(page)[0]["type"] == "error"
    await page.close()


async def test_dashboard_without_overview_is_empty(http):
    session = SessionContext(AuthService(http))
    page = DashboardPage(session, AnalyticsService(http))

    assert page.resource.loading is False
    assert overview(page)[0]["type"] == "empty"
