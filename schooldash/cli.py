# schooldash/cli.py
import argparse
import asyncio
import getpass
import sys
from typing import List, Optional

from schooldash.core.errors import DashboardError, error_message
from schooldash.core.http import CoreHTTP
from schooldash.core.logging import log, setup_logging
from schooldash.navigation import menu_for
from schooldash.pages.academics import AcademicHierarchyEditor
from schooldash.pages.lists import ParentsPage, StudentsPage, TeachersPage
from schooldash.services.academic import AcademicService
from schooldash.services.auth import AuthService
from schooldash.services.people import ParentService, StudentService, TeacherService
from schooldash.state.prompt import ConsolePrompter
from schooldash.state.session import SessionContext
from schooldash.views import people
from schooldash.views.academics import AcademicViews
from schooldash.views.render import render_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schooldash", description="School administration dashboard")
    parser.add_argument("--api", help="Backend base URL (defaults to SCHOOLDASH_API_BASE)")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--log-level", default=None)

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("menu", help="Show the navigation for the signed-in role")

    hierarchy = sub.add_parser("hierarchy", help="Grades, sections and subjects")
    hierarchy.add_argument("--search", default="")
    hierarchy.add_argument("--expand", action="append", default=[], help="Grade name to expand (repeatable)")

    schedule = sub.add_parser("schedule", help="Weekly timetable of one section")
    schedule.add_argument("--section-id", type=int)

    for name in ("teachers", "students", "parents"):
        sub.add_parser(name, help=f"List {name}").add_argument("--search", default="")
    return parser


async def run(args: argparse.Namespace, out=sys.stdout) -> int:
    prompter = ConsolePrompter(stream=out)
    async with CoreHTTP(base_url=args.api) as http:
        session = SessionContext(AuthService(http))
        password = args.password or getpass.getpass("Password: ")
        try:
            user = await session.login(args.email, password)
        except DashboardError as e:
            prompter.alert(f"Login failed: {error_message(e)}")
            return 1

        try:
            return await _show(args, http, session, user, prompter, out)
        finally:
            await session.logout()


async def _show(args, http: CoreHTTP, session: SessionContext, user, prompter: ConsolePrompter, out) -> int:
    if args.command == "menu":
        print(f"{user.name} ({user.role})", file=out)
        for item in menu_for(user.role):
            print(f"  {item.label:<15} {item.path}", file=out)
        return 0

    if not session.has_role("admin"):
        prompter.alert("This view is only available to administrators")
        return 1

    blocks: List[dict]
    if args.command in ("hierarchy", "schedule"):
        editor = AcademicHierarchyEditor(AcademicService(http), prompter)
        await editor.load()
        views = AcademicViews()
        if args.command == "hierarchy":
            editor.search = args.search
            for grade in editor.grades:
                if grade.name in args.expand and not editor.is_grade_expanded(grade.key):
                    editor.toggle_grade(grade.key)
            blocks = views.hierarchy(editor)
        else:
            if args.section_id is not None:
                await editor.schedule.select_section(args.section_id)
            blocks = views.schedule(editor.schedule)
        await editor.close()
    elif args.command == "teachers":
        page = TeachersPage(TeacherService(http), prompter)
        page.search = args.search
        await page.load()
        blocks = people.teachers(page)
    elif args.command == "students":
        page = StudentsPage(StudentService(http), prompter)
        page.search = args.search
        await page.load()
        blocks = people.students(page)
    else:
        page = ParentsPage(ParentService(http), StudentService(http), prompter)
        page.search = args.search
        await page.load()
        blocks = people.parents(page)

    out.write(render_text(blocks))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)
    log.debug("cli_start", command=args.command)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
