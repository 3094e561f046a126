from schooldash.pages.academics import AcademicHierarchyEditor
from schooldash.pages.schedule import PALETTE, TIME_SLOTS, ScheduleView, subject_color
from schooldash.schemas.academic import ScheduleCreate
from schooldash.views.academics import AcademicViews


def monday_math(**overrides):
    entry = {"id": 50, "subject_id": 3, "day_of_week": "Monday", "start_time": "08:00:00",
             "end_time": "09:30:00", "room": "R1", "class_id": 1}
    entry.update(overrides)
    return entry


async def test_grid_has_one_populated_cell(editor, backend):
    backend.schedules = [monday_math()]
    view = editor.schedule
    assert view.selected_grade.name == "9th"
    assert view.selected_section.name == "A"

    await view.load_entries()

    populated = [cell for row in view.grid() for cell in row if cell.entry is not None]
    assert len(populated) == 1
    assert populated[0].slot.label == "08:00 - 09:30"
    assert populated[0].day == "Monday"
    assert populated[0].color == PALETTE[3 % len(PALETTE)]
    assert len(view.grid()) == len(TIME_SLOTS)


async def test_schedule_table_shows_subject_name(editor, backend):
    backend.schedules = [monday_math()]
    await editor.schedule.load_entries()

    table = AcademicViews().schedule(editor.schedule)[-1]
    first_row = table["config"]["rows"][0]
    assert first_row["time"] == "08:00 - 09:30"
    assert first_row["Monday"] == "Mathematics (R1)"
    assert first_row["Tuesday"] == ""


def test_colors_collide_modulo_palette():
    assert subject_color(1) == subject_color(1 + len(PALETTE))
    assert subject_color(1) != subject_color(2)


async def test_add_entry_requires_subject(editor, backend, prompter):
    assert await editor.schedule.add_entry(ScheduleCreate()) is False

    assert prompter.alerts == ["Please select a subject"]
    assert backend.calls("POST", "/schedules") == []


async def test_add_entry_posts_for_selected_section(editor, backend):
    view = editor.schedule
    view.open_add_entry(subject_id=4, day_of_week="Wednesday", start_time="09:45", end_time="11:15", room="Lab")

    assert await view.add_entry() is True

    body = backend.calls("POST", "/schedules")[-1][2]
    assert body == {"subject_id": 4, "day_of_week": "Wednesday", "start_time": "09:45",
                    "end_time": "11:15", "room": "Lab", "class_id": 1}
    assert [e.day_of_week for e in view.entries] == ["Wednesday"]
    assert not view.modals.open_families()
    assert view.form == ScheduleCreate()


async def test_occupied_slot_is_rejected_before_submission(editor, backend, prompter):
    backend.schedules = [monday_math()]
    await editor.schedule.load_entries()

    ok = await editor.schedule.add_entry(ScheduleCreate(subject_id=4, day_of_week="Monday", start_time="08:00"))

    assert ok is False
    assert backend.calls("POST", "/schedules") == []
    assert "already taken" in prompter.alerts[0]


async def test_delete_entry_confirms_then_reloads(editor, backend, prompter):
    backend.schedules = [monday_math()]
    await editor.schedule.load_entries()

    assert await editor.schedule.delete_entry(50) is True

    assert prompter.confirms == ["Are you sure you want to delete this class entry?"]
    assert editor.schedule.entries == []


async def test_renaming_selected_grade_keeps_selection(editor):
    grade = next(g for g in editor.grades if g.name == "9th")
    await editor.schedule.select_section(2)

    assert await editor.update_grade(grade, "Grade 9") is True

    assert editor.schedule.selected_section_id == 2
    assert editor.schedule.selected_grade.name == "Grade 9"


async def test_deleted_section_falls_back_to_a_valid_one(editor):
    grade = next(g for g in editor.grades if g.name == "9th")

    assert await editor.delete_section(grade, grade.sections[0]) is True

    assert editor.schedule.selected_section_id == 2
    assert editor.schedule.selected_grade.name == "9th"


async def test_select_grade_picks_its_first_section(editor):
    assert (await editor.schedule.select_grade("11th Grade")).name == "Science"
    assert await editor.schedule.select_grade("missing") is None
    assert await editor.schedule.select_section(999) is None


async def test_no_sections_means_no_schedule_request(academic, backend, prompter):
    backend.grades = []
    view = ScheduleView(academic, prompter)
    view.sync([])

    assert await view.load_entries() == []
    assert backend.calls("GET", "/schedules") == []
    assert AcademicViews().schedule(view)[0]["type"] == "empty"


async def test_initial_load_fetches_the_selected_sections_entries(academic, backend, prompter):
    backend.schedules = [monday_math()]

    editor = AcademicHierarchyEditor(academic, prompter)
    await editor.load()

    assert [e.id for e in editor.schedule.entries] == [50]
    await editor.close()


async def test_fallback_after_delete_shows_the_new_sections_entries(editor, backend):
    backend.schedules = [monday_math(id=60, class_id=2, day_of_week="Tuesday", start_time="09:45:00")]
    grade = next(g for g in editor.grades if g.name == "9th")

    assert await editor.delete_section(grade, grade.sections[0]) is True

    assert editor.schedule.selected_section_id == 2
    populated = [cell for row in editor.schedule.grid() for cell in row if cell.entry is not None]
    assert [(c.day, c.slot.label) for c in populated] == [("Tuesday", "09:45 - 11:15")]


async def test_selecting_another_section_fetches_it(editor, backend):
    backend.schedules = [monday_math(id=70, class_id=5)]

    await editor.schedule.select_grade("11th Grade")

    assert [e.id for e in editor.schedule.entries] == [70]


async def test_selection_change_clears_previous_error(editor, backend):
    backend.fail("GET", "/schedules", 500, {"message": "Timetable service down"})
    await editor.schedule.load_entries()
    assert editor.schedule.error == "Timetable service down"

    del backend.failures[("GET", "/schedules")]
    await editor.schedule.select_section(2)

    assert editor.schedule.error is None
    assert "error" not in [b["type"] for b in AcademicViews().schedule(editor.schedule)]


async def test_malformed_schedule_payload_is_an_error_not_a_crash(editor, backend):
    backend.fail("GET", "/schedules", 200, [{"id": 1, "day_of_week": "Monday"}])

    assert await editor.schedule.load_entries() == []

    assert editor.schedule.error == "Something went wrong"
