"""Tests for the merged current project view."""

from types import MappingProxyType

from splatcad.shared.domain.projects import (
    NOT_SELECTED,
    CloudMetadataStore,
    CurrentProjectView,
    LocalFileRecord,
    LocalFilesBridge,
    SelectionStore,
    Unavailable,
    UnavailableReason,
    WholeProject,
    resolve_current_project,
)

from helpers import SequenceProvider, cloud_wire, file_wire


def build_view(cloud_records=(), inventory=None):
    cloud = CloudMetadataStore(cloud_records)
    if inventory is None:
        local = LocalFilesBridge(SequenceProvider([{}]))
    else:
        local = LocalFilesBridge.from_initial(inventory, SequenceProvider([inventory]))
    selection = SelectionStore()
    return cloud, local, selection, CurrentProjectView(cloud, local, selection)


def test_unknown_selection_with_empty_sources_is_unavailable():
    _, _, selection, view = build_view()

    selection.select(42)

    assert view.value == Unavailable(UnavailableReason.MISSING_BOTH, 42)
    assert not view.value
    assert not view.is_available


def test_no_selection_is_not_selected():
    _, _, _, view = build_view([cloud_wire(1, "Proj1")], {1: {"/a.txt": file_wire("/a.txt")}})
    assert view.value is NOT_SELECTED


def test_selected_project_in_both_sources_merges_exact_records(cloud_records, inventory):
    cloud, local, selection, view = build_view(cloud_records, inventory)

    selection.select(1)

    current = view.value
    assert isinstance(current, WholeProject)
    assert current.metadata is cloud.find(1)
    assert current.local_files is local.value[1]
    assert current.metadata.name == "Proj1"
    assert current.metadata.description == "first"
    assert current.local_files["/a.txt"] == LocalFileRecord(**file_wire("/a.txt", "aaa"))


def test_one_sided_projects_report_what_is_missing(cloud_records, inventory):
    _, _, selection, view = build_view(cloud_records, inventory)

    selection.select(3)
    assert view.value == Unavailable(UnavailableReason.MISSING_LOCAL, 3)

    inventory_only = {9: {"/z.txt": file_wire("/z.txt")}}
    _, _, selection, view = build_view(cloud_records, inventory_only)
    selection.select(9)
    assert view.value == Unavailable(UnavailableReason.MISSING_CLOUD, 9)


def test_string_and_integer_ids_name_the_same_project():
    _, _, selection, view = build_view([cloud_wire(7, "Seven")], {"7": {"/s.txt": file_wire("/s.txt")}})

    selection.select("7")
    assert isinstance(view.value, WholeProject)

    selection.select(7)
    assert view.value.metadata.name == "Seven"


def test_view_follows_selection_changes_and_clear(cloud_records, inventory):
    _, _, selection, view = build_view(cloud_records, inventory)
    seen = []
    view.subscribe(seen.append)

    selection.select(2)
    selection.clear()

    assert seen[0] is NOT_SELECTED
    assert isinstance(seen[1], WholeProject) and seen[1].metadata.name == "Proj2"
    assert seen[2] is NOT_SELECTED


def test_cloud_replace_is_observed_as_one_step(cloud_records, inventory):
    cloud, _, selection, view = build_view(cloud_records, inventory)
    selection.select(2)
    seen_views, seen_records = [], []
    view.subscribe(seen_views.append)
    cloud.subscribe(seen_records.append)

    cloud.replace_all([cloud_wire(1, "Proj1 v2"), cloud_wire(2, "Proj2 v2"), cloud_wire(3, "CloudOnly v2")])

    assert [len(records) for records in seen_records] == [3, 3]
    assert {r.name for r in seen_records[-1]} == {"Proj1 v2", "Proj2 v2", "CloudOnly v2"}
    assert len(seen_views) == 2
    assert seen_views[-1].metadata.name == "Proj2 v2"


def test_resolve_is_pure_and_deterministic(cloud_records):
    records = CloudMetadataStore(cloud_records).value
    mapping = MappingProxyType({1: MappingProxyType({})})

    first = resolve_current_project(records, mapping, 1)
    second = resolve_current_project(records, mapping, 1)

    assert first == second
    assert dict(first.local_files) == {}
    assert resolve_current_project(records, mapping, None) is NOT_SELECTED


def test_view_never_triggers_a_refresh(cloud_records):
    provider = SequenceProvider([{}])
    cloud = CloudMetadataStore(cloud_records)
    local = LocalFilesBridge(provider)
    selection = SelectionStore()
    view = CurrentProjectView(cloud, local, selection)

    selection.select(1)
    _ = view.value

    assert provider.calls == 0
    assert view.value == Unavailable(UnavailableReason.MISSING_LOCAL, 1)


def test_close_freezes_last_value(cloud_records, inventory):
    _, _, selection, view = build_view(cloud_records, inventory)
    selection.select(1)
    view.close()

    selection.select(2)

    assert view.value.metadata.name == "Proj1"
