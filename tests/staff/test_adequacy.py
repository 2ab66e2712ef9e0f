from staffing_system.staff.adequacy import FULLY_STAFFED, SHORT_STAFFED, evaluate, group_by_shift
from staffing_system.staff.model import Staff


def _staff(*roles, shift="Morning"):
    return [
        Staff(staff_id=i, staff_code=f"X{i:03d}", name=f"Member {i}", role=role, shift=shift)
        for i, role in enumerate(roles, start=1)
    ]


def test_empty_input_gives_empty_result():
    assert evaluate({}) == {}


def test_full_shift():
    status = evaluate({"Morning": _staff("Doctor", "Nurse", "Nurse", "Technician")})["Morning"]

    assert status.is_fully_staffed
    assert status.staff_count == {"Doctor": 1, "Nurse": 2, "Technician": 1}
    assert status.shortages is None
    assert status.missing_staff is None
    assert status.message == FULLY_STAFFED


def test_shortages_listed_in_role_order():
    status = evaluate({"Night": _staff("Nurse", "Technician", shift="Night")})["Night"]

    assert not status.is_fully_staffed
    assert [(s.role, s.required, s.current, s.needed) for s in status.shortages] == [
        ("Doctor", 1, 0, 1),
        ("Nurse", 2, 1, 1),
    ]
    assert status.missing_staff == {"Doctor": 1, "Nurse": 1}
    assert status.message == SHORT_STAFFED


def test_lab_technician_counts_toward_technician_quota():
    status = evaluate({"Evening": _staff("Doctor", "Nurse", "Nurse", "Lab Technician")})["Evening"]

    assert status.is_fully_staffed
    assert status.staff_count["Technician"] == 1


def test_technicians_and_lab_technicians_are_summed():
    status = evaluate({"Morning": _staff("Technician", "Lab Technician")})["Morning"]

    assert status.staff_count["Technician"] == 2


def test_unknown_roles_fill_no_quota():
    status = evaluate({"Morning": _staff("Receptionist", "Porter")})["Morning"]

    assert status.staff_count == {"Doctor": 0, "Nurse": 0, "Technician": 0}
    assert status.missing_staff == {"Doctor": 1, "Nurse": 2, "Technician": 1}


def test_group_by_shift_keeps_first_seen_order():
    members = _staff("Doctor", shift="Night") + _staff("Nurse", shift="Morning") + _staff("Nurse", shift="Night")

    result = evaluate(group_by_shift(members))

    assert list(result) == ["Night", "Morning"]


def test_as_dict_uses_snake_case_and_none_for_nothing_missing():
    data = evaluate({"Morning": _staff("Doctor", "Nurse", "Nurse", "Technician")})["Morning"].as_dict()

    assert data == {
        "is_fully_staffed": True,
        "staff_count": {"Doctor": 1, "Nurse": 2, "Technician": 1},
        "requirements": {"Doctor": 1, "Nurse": 2, "Technician": 1},
        "shortages": None,
        "missing_staff": None,
        "message": "Fully staffed",
    }
