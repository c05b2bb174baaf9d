from shared.domain.academic import Subject


def test_invalid_prerequisites_are_dropped():
    subject = Subject(id=3, specialism=1, duration=2, prerequisites=[5, 1, -1, 3, 0])

    assert subject.prerequisites == [0, 1]


def test_set_prerequisites_overwrites():
    subject = Subject(id=4, specialism=1, duration=2, prerequisites=[1])

    subject.set_prerequisites([2, 4, 7])

    assert subject.prerequisites == [2]


def test_add_prerequisites_merges():
    subject = Subject(id=4, specialism=1, duration=2, prerequisites=[2])

    subject.add_prerequisites([1, 9, -3])

    assert subject.prerequisites == [1, 2]


def test_prerequisites_stay_valid_after_any_update():
    subject = Subject(id=5, specialism=2, duration=1)

    for batch in ([6, 5, 4], [-2, 0], [3, 10, 1]):
        subject.add_prerequisites(batch)
        assert all(0 <= p < subject.id for p in subject.prerequisites)

    subject.set_prerequisites([7, 8])
    assert subject.prerequisites == []


def test_lowest_subject_cannot_have_prerequisites():
    subject = Subject(id=0, specialism=1, duration=1, prerequisites=[0])

    assert subject.prerequisites == []


def test_non_positive_duration_is_repaired():
    assert Subject(id=1, specialism=1, duration=0).duration == 1
    assert Subject(id=1, specialism=1, duration=-4).duration == 1
    assert Subject(id=1, specialism=1, duration=6).duration == 6


def test_subjects_sort_by_description():
    b = Subject(id=1, description="B", specialism=1, duration=1)
    a = Subject(id=2, description="A", specialism=1, duration=1)

    assert sorted([b, a]) == [a, b]
