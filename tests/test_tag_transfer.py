"""Tests for tag export and the layered-matching import."""

from conftest import FailingNameResolver, FakeNameResolver

from core.models import TagExportData, TagFilterMode
from core.services.tag_transfer_service import TagTransferService
from infrastructure.kv_store import InMemoryKeyValueStore
from infrastructure.reference_store import ReferenceListStore
from infrastructure.tag_store import TagStore

BEACH = "content://media/external/images/media/101"
DOG = "content://media/external/images/media/102"


def _make(names=None, refs=(), resolver=None):
    kv = InMemoryKeyValueStore()
    refs_store = ReferenceListStore(kv)
    refs_store.add_all(refs)
    tags = TagStore(kv, refs_store)
    service = TagTransferService(refs_store, tags, resolver or FakeNameResolver(names))
    return service, refs_store, tags


class TestExport:
    def test_snapshot_contents(self):
        service, _, tags = _make({BEACH: "beach.jpg", DOG: "dog.jpg"}, [BEACH, DOG])
        tags.add_tag(BEACH, "Summer")
        tags.add_tag(BEACH, "Sea")
        tags.set_active_tags({"Summer"})
        tags.set_hidden_tags({"Private"})
        tags.set_filter_mode(TagFilterMode.AND)
        tags.set_auto_tag_enabled(True)

        snapshot = service.export_snapshot()

        assert snapshot.mappings == {"beach.jpg": ["Sea", "Summer"]}
        assert snapshot.catalog == {"Summer", "Sea", "Images", "Videos"}
        assert snapshot.active_tags == {"Summer"}
        assert snapshot.hidden_tags == {"Private"}
        assert snapshot.filter_mode is TagFilterMode.AND
        assert snapshot.auto_tag_enabled is True

    def test_falls_back_to_last_segment(self):
        service, _, tags = _make({}, [BEACH])
        tags.add_tag(BEACH, "Summer")
        assert service.export_snapshot().mappings == {"101": ["Summer"]}

    def test_resolver_errors_fall_back_to_last_segment(self):
        service, _, tags = _make(refs=[BEACH], resolver=FailingNameResolver())
        tags.add_tag(BEACH, "Summer")
        assert service.export_snapshot().mappings == {"101": ["Summer"]}

    def test_unexpected_resolver_errors_fall_back(self):
        service, _, tags = _make(refs=[BEACH], resolver=FailingNameResolver(RuntimeError))
        tags.add_tag(BEACH, "Summer")
        assert service.export_snapshot().mappings == {"101": ["Summer"]}
        assert service.display_name(BEACH) == "101"


class TestImport:
    def test_round_trip_reproduces_assignments(self):
        names = {BEACH: "beach.jpg", DOG: "dog.jpg"}
        source, _, source_tags = _make(names, [BEACH, DOG])
        source_tags.add_tag(BEACH, "Summer")
        source_tags.add_tag(DOG, "Pets")
        source_tags.add_tag(DOG, "Summer")
        snapshot = source.export_snapshot()

        other_beach = "content://media/external/images/media/900"
        other_dog = "content://media/external/images/media/901"
        target, _, target_tags = _make(
            {other_beach: "beach.jpg", other_dog: "dog.jpg"}, [other_beach, other_dog]
        )
        summary = target.import_snapshot(snapshot)

        assert target_tags.tags_of(other_beach) == {"Summer"}
        assert target_tags.tags_of(other_dog) == {"Pets", "Summer"}
        assert sorted(summary.matched) == ["beach.jpg", "dog.jpg"]
        assert summary.unmatched == []

    def test_name_collision_tags_every_match(self):
        a = "content://a/1"
        b = "content://b/2"
        service, _, tags = _make({a: "same.jpg", b: "same.jpg"}, [a, b])
        service.import_snapshot(TagExportData(mappings={"same.jpg": ["X"]}))
        assert tags.tags_of(a) == {"X"}
        assert tags.tags_of(b) == {"X"}

    def test_exact_reference_match(self):
        service, _, tags = _make({BEACH: "beach.jpg"}, [BEACH])
        service.import_snapshot(TagExportData(mappings={BEACH: ["Summer"]}))
        assert tags.tags_of(BEACH) == {"Summer"}

    def test_filename_extracted_from_encoded_uri(self):
        current = "content://media/external/images/media/555"
        service, _, tags = _make({current: "cat.jpg"}, [current])
        old_key = (
            "content://com.android.externalstorage.documents/document/primary%3ADCIM%2Fcat.jpg"
        )
        summary = service.import_snapshot(TagExportData(mappings={old_key: ["Pets"]}))
        assert tags.tags_of(current) == {"Pets"}
        assert summary.matched == [old_key]

    def test_filename_extracted_from_plain_uri(self):
        current = "content://media/external/images/media/555"
        service, _, tags = _make({current: "cat.jpg"}, [current])
        service.import_snapshot(TagExportData(mappings={"file:///old/phone/cat.jpg": ["Pets"]}))
        assert tags.tags_of(current) == {"Pets"}

    def test_unresolvable_name_is_skipped(self):
        service, _, tags = _make({BEACH: "beach.jpg"}, [BEACH])
        summary = service.import_snapshot(
            TagExportData(catalog={"Ghost"}, mappings={"missing.jpg": ["Ghost"]})
        )
        assert tags.tags_of(BEACH) == set()
        assert summary.unmatched == ["missing.jpg"]
        assert "Ghost" in tags.catalog()

    def test_merge_keeps_existing_tags(self):
        service, _, tags = _make({BEACH: "beach.jpg"}, [BEACH])
        tags.add_tag(BEACH, "Local")
        service.import_snapshot(TagExportData(mappings={"beach.jpg": ["Remote"]}))
        assert tags.tags_of(BEACH) == {"Local", "Remote"}

    def test_preferences_replaced_when_present(self):
        service, _, tags = _make()
        tags.set_active_tags({"Old"})
        tags.set_hidden_tags({"OldHidden"})
        service.import_snapshot(
            TagExportData(
                active_tags={"New"},
                hidden_tags=set(),
                filter_mode=TagFilterMode.XOR,
                auto_tag_enabled=True,
            )
        )
        assert tags.active_tags() == {"New"}
        assert tags.hidden_tags() == set()
        assert tags.filter_mode() is TagFilterMode.XOR
        assert tags.auto_tag_enabled() is True

    def test_absent_fields_leave_preferences_alone(self):
        service, _, tags = _make()
        tags.set_active_tags({"Old"})
        tags.set_filter_mode(TagFilterMode.AND)
        tags.set_auto_tag_enabled(True)
        service.import_snapshot(TagExportData())
        assert tags.active_tags() == {"Old"}
        assert tags.filter_mode() is TagFilterMode.AND
        assert tags.auto_tag_enabled() is True

    def test_none_snapshot(self):
        service, _, _ = _make()
        summary = service.import_snapshot(None)
        assert summary.matched == [] and summary.unmatched == []
