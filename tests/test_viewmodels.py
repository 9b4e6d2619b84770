"""Tests for the gallery and tag catalog view-models."""

from app.viewmodels.gallery_vm import GalleryVM
from app.viewmodels.tag_catalog_vm import TagCatalogVM, sort_tags
from core.models import GallerySortOption, MediaFilter, TagInfo, TagSortOption

BEACH = "file:///pics/beach_sunset.jpg"
DOG = "file:///pics/dog.mp4"
CAT = "file:///pics/cat.jpg"


class TestGalleryVM:
    def test_add_references_tags_media_type(self, prefs):
        vm = GalleryVM(prefs)
        added = vm.add_references([BEACH, DOG, "file:///other/dog.mp4"])
        assert added == [BEACH, DOG]
        assert prefs.tags.tags_of(BEACH) == {"Images"}
        assert prefs.tags.tags_of(DOG) == {"Videos"}
        assert [item.reference for item in vm.items] == [BEACH, DOG]
        assert vm.pending_auto_tag == []

    def test_auto_tag_queue_when_enabled(self, prefs):
        prefs.tags.add_to_catalog("sunset")
        vm = GalleryVM(prefs)
        vm.set_auto_tag_enabled(True)
        vm.add_references([BEACH])
        assert vm.pending_auto_tag == [BEACH]
        assert vm.perform_auto_tag() == 1
        assert vm.pending_auto_tag == []
        assert prefs.tags.tags_of(BEACH) == {"Images", "sunset"}

    def test_dismiss_auto_tag(self, prefs):
        vm = GalleryVM(prefs)
        vm.set_auto_tag_enabled(True)
        vm.add_references([BEACH])
        vm.dismiss_auto_tag()
        assert vm.perform_auto_tag() == 0

    def test_bulk_tag_edit_on_selection(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, CAT])
        vm.toggle_selection(BEACH)
        vm.toggle_selection(CAT)
        vm.add_tag_to_selected("Fav")
        assert prefs.tags.tags_of(BEACH) == {"Images", "Fav"}
        vm.toggle_selection(CAT)
        vm.remove_tag_from_selected("Fav")
        assert prefs.tags.tags_of(BEACH) == {"Images"}
        assert prefs.tags.tags_of(CAT) == {"Images", "Fav"}
        assert vm.selected == {BEACH}

    def test_items_follow_filter(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, DOG])
        prefs.tags.set_hidden_tags({"Videos"})
        vm.load_items()
        assert [item.reference for item in vm.items] == [BEACH]

    def test_remove_references_prunes_selection(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, CAT])
        vm.toggle_selection(BEACH)
        vm.remove_references([BEACH])
        assert vm.selected == set()
        assert prefs.references.references() == [CAT]

    def test_media_filter_narrows_items_and_clears_selection(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, DOG, CAT])
        vm.toggle_selection(BEACH)
        vm.set_filter(MediaFilter.VIDEOS_ONLY)
        assert [item.reference for item in vm.items] == [DOG]
        assert vm.items[0].is_video
        assert vm.selected == set()
        vm.set_filter(MediaFilter.IMAGES_ONLY)
        assert [item.reference for item in vm.items] == [BEACH, CAT]
        vm.set_filter(MediaFilter.ALL)
        assert len(vm.items) == 3

    def test_sort_options(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, DOG, CAT])
        prefs.tags.add_tag(CAT, "Pet")
        prefs.tags.add_tag(CAT, "Fav")
        prefs.tags.add_tag(DOG, "Pet")
        vm.load_items()
        vm.set_sort_option(GallerySortOption.NAME_ASC)
        assert [item.name for item in vm.items] == ["beach_sunset.jpg", "cat.jpg", "dog.mp4"]
        vm.set_sort_option(GallerySortOption.NAME_DESC)
        assert [item.name for item in vm.items] == ["dog.mp4", "cat.jpg", "beach_sunset.jpg"]
        vm.set_sort_option(GallerySortOption.TAG_COUNT_DESC)
        assert [item.reference for item in vm.items] == [CAT, DOG, BEACH]
        vm.set_sort_option(GallerySortOption.TAG_COUNT_ASC)
        assert [item.reference for item in vm.items] == [BEACH, DOG, CAT]

    def test_sort_survives_reload(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([DOG, BEACH])
        vm.set_sort_option(GallerySortOption.NAME_ASC)
        vm.load_items()
        assert [item.reference for item in vm.items] == [BEACH, DOG]

    def test_select_all_and_deselect_all(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, DOG])
        prefs.tags.set_hidden_tags({"Videos"})
        vm.load_items()
        vm.select_all()
        assert vm.selected == {BEACH}
        vm.deselect_all()
        assert vm.selected == set()

    def test_toggle_tag_filter(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, CAT])
        prefs.tags.add_tag(CAT, "Pet")
        vm.toggle_selection(BEACH)
        vm.toggle_tag_filter("Pet")
        assert prefs.tags.active_tags() == {"Pet"}
        assert [item.reference for item in vm.items] == [CAT]
        assert vm.selected == set()
        vm.toggle_tag_filter("Pet")
        assert prefs.tags.active_tags() == set()
        assert len(vm.items) == 2

    def test_clear_tag_filters_keeps_hidden(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, DOG])
        prefs.tags.set_hidden_tags({"Videos"})
        vm.toggle_tag_filter("Images")
        vm.select_all()
        vm.clear_tag_filters()
        assert prefs.tags.active_tags() == set()
        assert prefs.tags.hidden_tags() == {"Videos"}
        assert vm.selected == set()

    def test_replace_media(self, prefs):
        vm = GalleryVM(prefs)
        vm.add_references([BEACH, CAT])
        vm.select_all()
        vm.replace_media(BEACH, "file:///pics/beach_edit.jpg")
        assert prefs.references.references() == ["file:///pics/beach_edit.jpg", CAT]
        assert [item.reference for item in vm.items] == ["file:///pics/beach_edit.jpg", CAT]
        assert vm.selected == set()


class TestTagCatalogVM:
    def test_counts_and_system_flags(self, prefs):
        prefs.references.add_all([BEACH, CAT])
        prefs.tags.add_tag(BEACH, "Sea")
        prefs.tags.add_tag(CAT, "Sea")
        prefs.tags.add_tag(CAT, "Images")
        vm = TagCatalogVM(prefs)
        rows = {info.name: info for info in vm.tags}
        assert rows["Sea"].count == 2
        assert rows["Images"].count == 1
        assert rows["Images"].is_system_tag
        assert rows["Videos"].count == 0
        assert not rows["Sea"].is_system_tag

    def test_crud_reloads(self, prefs):
        prefs.references.add(CAT)
        vm = TagCatalogVM(prefs)
        vm.add_tag("Pets")
        assert "Pets" in {t.name for t in vm.tags}
        prefs.tags.add_tag(CAT, "Pets")
        vm.rename_tag("Pets", "Animals")
        assert {t.name for t in vm.tags} == {"Animals", "Images", "Videos"}
        assert prefs.tags.tags_of(CAT) == {"Animals"}
        vm.delete_tag("Animals")
        assert {t.name for t in vm.tags} == {"Images", "Videos"}
        assert prefs.tags.tags_of(CAT) == set()

    def test_perform_auto_tag_targets(self, prefs):
        prefs.references.add_all([BEACH, CAT])
        prefs.tags.add_to_catalog("beach")
        prefs.tags.add_to_catalog("cat")
        vm = TagCatalogVM(prefs)
        assert vm.perform_auto_tag(target_tag="beach") == 1
        assert prefs.tags.tags_of(CAT) == set()
        assert vm.perform_auto_tag(target_reference=CAT) == 1
        assert prefs.tags.tags_of(CAT) == {"cat"}

    def test_export_import_files(self, prefs, tmp_path):
        prefs.references.add(CAT)
        prefs.tags.add_tag(CAT, "Pets")
        vm = TagCatalogVM(prefs)
        path = tmp_path / "tags.json"
        assert vm.export_tags(path)

        prefs.tags.remove_tag(CAT, "Pets")
        summary = vm.import_tags(path)
        assert summary.matched == ["cat.jpg"]
        assert prefs.tags.tags_of(CAT) == {"Pets"}
        assert vm.import_tags(tmp_path / "missing.json") is None


def test_sort_tags_options():
    rows = [TagInfo("b", 1), TagInfo("A", 3), TagInfo("c", 2)]
    assert [t.name for t in sort_tags(rows, TagSortOption.NAME_ASC)] == ["A", "b", "c"]
    assert [t.name for t in sort_tags(rows, TagSortOption.NAME_DESC)] == ["c", "b", "A"]
    assert [t.name for t in sort_tags(rows, TagSortOption.COUNT_ASC)] == ["b", "c", "A"]
    assert [t.name for t in sort_tags(rows, TagSortOption.COUNT_DESC)] == ["A", "c", "b"]
