"""Tests for unity_modules/flatten.py - module forest flattening"""

from __future__ import annotations

from typing import Any

import pytest

from unity_modules.exceptions import ModuleDataError
from unity_modules.flatten import SELECTED_MODULE_ID, SYNC_PARENT_ID, build_module, count_nodes, flatten_modules
from unity_modules.models import ModuleOnline


def _node(module_id: str, *children: dict[str, Any], **fields: Any) -> dict[str, Any]:
    node: dict[str, Any] = {"id": module_id, **fields}
    if children:
        node["subModules"] = list(children)
    return node


@pytest.fixture
def android_forest() -> list[dict[str, Any]]:
    """Shape of the android branch returned by the release API."""
    return [
        {
            "__typename": "UnityReleaseModule",
            "url": "https://download.unity3d.com/android.pkg",
            "integrity": "sha384-abc",
            "type": "PKG",
            "id": "android",
            "slug": "android",
            "name": "Android Build Support",
            "description": "Allows building your Unity projects for the Android platform",
            "category": "PLATFORM",
            "required": False,
            "hidden": False,
            "preSelected": False,
            "destination": "{UNITY_PATH}/PlaybackEngines/AndroidPlayer",
            "extractedPathRename": None,
            "downloadSize": {"unit": "BYTE", "value": 731906048},
            "installedSize": {"unit": "BYTE", "value": 2171822080},
            "eula": [],
            "subModules": [
                {
                    "id": "android-sdk-ndk-tools",
                    "name": "Android SDK & NDK Tools",
                    "category": "PLATFORM",
                    "hidden": False,
                    "downloadSize": {"unit": "BYTE", "value": 1},
                    "installedSize": {"unit": "BYTE", "value": 2},
                    "eula": [
                        {
                            "url": "https://dl.google.com/android/repository/repository2-1.xml",
                            "integrity": None,
                            "type": "TEXT",
                            "label": "Android SDK and NDK License Terms from Google",
                            "message": "Please review and accept the license terms before downloading.",
                        }
                    ],
                    "subModules": [
                        {
                            "id": "android-sdk-platforms",
                            "name": "Android SDK Platforms",
                            "hidden": True,
                            "extractedPathRename": {
                                "from": "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/SDK/platforms/android-34",
                                "to": "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/SDK/platforms",
                            },
                        },
                        {
                            "name": "Android NDK",
                            "slug": "android-ndk",
                            "id": "android-ndk",
                            "description": "NDK r23b",
                            "url": "https://dl.google.com/android/repository/android-ndk-r23b.zip",
                            "destination": "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/NDK",
                        },
                    ],
                },
                {
                    "id": "android-open-jdk",
                    "name": "OpenJDK",
                    "hidden": False,
                },
            ],
        },
        {"id": "ios", "name": "iOS Build Support", "preSelected": True},
    ]


class TestFlattenOrder:
    def test_pre_order_depth_first(self) -> None:
        forest = [_node("A", _node("B", _node("D")), _node("C"))]

        result = flatten_modules(forest)

        assert [m.id for m in result] == ["A", "B", "D", "C"]

    def test_multiple_roots_keep_sibling_order(self) -> None:
        forest = [_node("r1", _node("c1")), _node("r2"), _node("r3", _node("c3a"), _node("c3b"))]

        result = flatten_modules(forest)

        assert [m.id for m in result] == ["r1", "c1", "r2", "r3", "c3a", "c3b"]

    def test_length_equals_node_count(self, android_forest: list[dict[str, Any]]) -> None:
        result = flatten_modules(android_forest)

        assert len(result) == count_nodes(android_forest) == 6

    def test_arbitrary_depth(self) -> None:
        node = _node("level-9")
        for level in range(8, -1, -1):
            node = _node(f"level-{level}", node)

        result = flatten_modules([node])

        assert [m.id for m in result] == [f"level-{i}" for i in range(10)]
        assert result[-1].parent == "level-8"

    def test_deep_chain_beyond_recursion_limits(self) -> None:
        depth = 2000
        node = _node(f"level-{depth - 1}")
        for level in range(depth - 2, -1, -1):
            node = _node(f"level-{level}", node)

        result = flatten_modules([node])

        assert len(result) == count_nodes([node]) == depth
        assert result[0].parent == ""
        assert result[-1].id == f"level-{depth - 1}"
        assert result[-1].parent == f"level-{depth - 2}"

    def test_sibling_order_under_nested_parents(self) -> None:
        forest = [_node("A", _node("B", _node("C"), _node("D")), _node("E")), _node("F")]

        result = flatten_modules(forest)

        assert [m.id for m in result] == ["A", "B", "C", "D", "E", "F"]
        assert [m.parent for m in result] == ["", "A", "B", "B", "A", ""]

    def test_empty_forest(self) -> None:
        assert flatten_modules([]) == []

    def test_accepts_module_online_instances(self) -> None:
        forest = [ModuleOnline.model_validate(_node("A", _node("B")))]

        assert [m.id for m in flatten_modules(forest)] == ["A", "B"]


class TestParentAndSync:
    def test_top_level_parent_is_empty(self, android_forest: list[dict[str, Any]]) -> None:
        result = flatten_modules(android_forest)

        assert result[0].parent == ""
        assert result[0].sync == ""

    def test_parent_is_immediate_ancestor(self, android_forest: list[dict[str, Any]]) -> None:
        by_id = {m.id: m for m in flatten_modules(android_forest)}

        assert by_id["android-sdk-ndk-tools"].parent == "android"
        assert by_id["android-sdk-platforms"].parent == "android-sdk-ndk-tools"
        assert by_id["android-open-jdk"].parent == "android"

    def test_sync_set_under_sdk_ndk_tools(self, android_forest: list[dict[str, Any]]) -> None:
        by_id = {m.id: m for m in flatten_modules(android_forest)}

        assert by_id["android-sdk-platforms"].sync == SYNC_PARENT_ID
        assert by_id["android-ndk"].sync == SYNC_PARENT_ID

    def test_sync_empty_under_other_parents(self, android_forest: list[dict[str, Any]]) -> None:
        by_id = {m.id: m for m in flatten_modules(android_forest)}

        assert by_id["android-sdk-ndk-tools"].sync == ""
        assert by_id["android-open-jdk"].sync == ""

    def test_children_of_parent_without_id_get_empty_parent(self) -> None:
        forest = [{"name": "anonymous", "subModules": [_node("child")]}]

        result = flatten_modules(forest)

        assert result[1].parent == ""


class TestDerivedFields:
    @pytest.mark.parametrize(
        ("module_id", "expected"),
        [("android", True), ("ios", False), ("Android", False), ("android-ndk", False), ("", False)],
    )
    def test_selected_only_for_android(self, module_id: str, expected: bool) -> None:
        assert build_module(ModuleOnline(id=module_id)).selected is expected

    def test_selected_constant(self) -> None:
        assert SELECTED_MODULE_ID == "android"

    def test_visible_is_not_hidden(self) -> None:
        assert build_module(ModuleOnline(hidden=True)).visible is False
        assert build_module(ModuleOnline(hidden=False)).visible is True
        assert build_module(ModuleOnline()).visible is True

    def test_download_url_copies_url(self) -> None:
        module = build_module(ModuleOnline(url="https://example.com/ios.pkg"))

        assert module.download_url == "https://example.com/ios.pkg"

    def test_preselected_alias(self) -> None:
        module = build_module(ModuleOnline.model_validate({"preSelected": True}))

        assert module.pre_selected is True
        assert module.preselected is True

    def test_first_eula_projected(self, android_forest: list[dict[str, Any]]) -> None:
        tools = flatten_modules(android_forest)[1]

        assert tools.eula_url1 == "https://dl.google.com/android/repository/repository2-1.xml"
        assert tools.eula_label1 == "Android SDK and NDK License Terms from Google"
        assert tools.eula_message == "Please review and accept the license terms before downloading."

    def test_only_first_eula_projected(self) -> None:
        node = {"eula": [{"url": "first", "label": "L1"}, {"url": "second", "label": "L2", "message": "M2"}]}

        module = build_module(ModuleOnline.model_validate(node))

        assert module.eula_url1 == "first"
        assert module.eula_label1 == "L1"
        assert module.eula_message == ""
        assert module.eula is not None and len(module.eula) == 2

    def test_null_first_eula_projects_empty_strings(self) -> None:
        module = flatten_modules([{"id": "a", "eula": [None, {"url": "second"}]}])[0]

        assert (module.eula_url1, module.eula_label1, module.eula_message) == ("", "", "")
        assert module.eula == [None, {"url": "second"}]

    def test_no_eula_projects_empty_strings(self) -> None:
        module = build_module(ModuleOnline(eula=[]))

        assert module.eula is None
        assert (module.eula_url1, module.eula_label1, module.eula_message) == ("", "", "")

    def test_rename_projected(self, android_forest: list[dict[str, Any]]) -> None:
        by_id = {m.id: m for m in flatten_modules(android_forest)}
        platforms = by_id["android-sdk-platforms"]

        assert platforms.rename_from == "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/SDK/platforms/android-34"
        assert platforms.rename_to == "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/SDK/platforms"
        assert platforms.extracted_path_rename == {
            "from": "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/SDK/platforms/android-34",
            "to": "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/SDK/platforms",
        }

    def test_empty_rename_is_null(self) -> None:
        module = build_module(ModuleOnline.model_validate({"extractedPathRename": {}}))

        assert module.extracted_path_rename is None
        assert module.rename_to == ""
        assert module.rename_from == ""


class TestDefaults:
    def test_minimal_node_gets_defaults(self) -> None:
        module = build_module(ModuleOnline())

        assert module.url == ""
        assert module.id == ""
        assert module.download_size == 0
        assert module.installed_size == 0
        assert module.required is False
        assert module.hidden is False
        assert module.destination is None
        assert module.eula is None
        assert module.extracted_path_rename is None
        assert module.sub_modules == []

    def test_sizes_unwrapped(self, android_forest: list[dict[str, Any]]) -> None:
        android = flatten_modules(android_forest)[0]

        assert android.download_size == 731906048
        assert android.installed_size == 2171822080

    @pytest.mark.parametrize(
        "field",
        ["downloadSize", "installedSize", "eula", "extractedPathRename", "subModules", "url", "required"],
    )
    def test_null_fields_do_not_raise(self, field: str) -> None:
        result = flatten_modules([{"id": "x", field: None}])

        assert len(result) == 1

    def test_null_size_value(self) -> None:
        module = build_module(ModuleOnline.model_validate({"downloadSize": {"value": None, "unit": "BYTE"}}))

        assert module.download_size == 0

    def test_empty_destination_is_null(self) -> None:
        assert build_module(ModuleOnline(destination="")).destination is None

    def test_sub_modules_always_empty(self, android_forest: list[dict[str, Any]]) -> None:
        assert all(m.sub_modules == [] for m in flatten_modules(android_forest))

    def test_eula_entries_copied_verbatim(self, android_forest: list[dict[str, Any]]) -> None:
        tools = flatten_modules(android_forest)[1]

        assert tools.eula == android_forest[0]["subModules"][0]["eula"]


class TestStructuralErrors:
    def test_sub_modules_not_a_list(self) -> None:
        with pytest.raises(ModuleDataError) as exc_info:
            flatten_modules([{"id": "x", "subModules": "oops"}])

        assert exc_info.value.code == "INVALID_MODULE_DATA"

    def test_nested_sub_modules_not_a_list(self) -> None:
        with pytest.raises(ModuleDataError):
            flatten_modules([_node("a", _node("b", subModules={"id": "c"}))])

    def test_node_not_an_object(self) -> None:
        with pytest.raises(ModuleDataError):
            flatten_modules(["android"])

    @pytest.mark.parametrize("forest", [{"id": "a"}, "android", None])
    def test_forest_not_a_list(self, forest: object) -> None:
        with pytest.raises(ModuleDataError):
            flatten_modules(forest)  # type: ignore[arg-type]


class TestToDict:
    def test_key_order(self) -> None:
        data = build_module(ModuleOnline(id="ios")).to_dict()

        assert list(data) == [
            "url",
            "integrity",
            "type",
            "id",
            "name",
            "slug",
            "description",
            "category",
            "downloadSize",
            "installedSize",
            "required",
            "hidden",
            "extractedPathRename",
            "preSelected",
            "destination",
            "eula",
            "subModules",
            "downloadUrl",
            "visible",
            "selected",
            "sync",
            "parent",
            "eulaUrl1",
            "eulaLabel1",
            "eulaMessage",
            "renameTo",
            "renameFrom",
            "preselected",
        ]

    def test_values(self, android_forest: list[dict[str, Any]]) -> None:
        data = flatten_modules(android_forest)[3].to_dict()

        assert data["id"] == "android-ndk"
        assert data["parent"] == "android-sdk-ndk-tools"
        assert data["sync"] == "android-sdk-ndk-tools"
        assert data["destination"] == "{UNITY_PATH}/PlaybackEngines/AndroidPlayer/NDK"
        assert data["downloadSize"] == 0
        assert data["subModules"] == []
        assert data["eula"] is None
