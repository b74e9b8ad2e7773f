"""Unit tests for core models."""

import pytest
from pydantic import ValidationError

from quickapp.models.app import (
    AppDeclaration,
    ButtonNode,
    ColumnNode,
    GoToAction,
    HttpGetAction,
    InputNode,
    LogAction,
    ReadFileAction,
    RowNode,
    ScreenDeclaration,
    TextNode,
    ToastAction,
    WriteFileAction,
    action_input_refs,
    walk_widgets,
)
from quickapp.models.codegen import (
    ArtifactName,
    BuildArtifact,
    DependencyScope,
    GradleDependency,
    GradlePlugin,
)
from quickapp.models.package import PackageIdentity, clean_filename


class TestFilenameCleaning:
    """Tests for package identity derivation."""

    @pytest.mark.parametrize(
        "file_name, expected",
        [
            ("FooBar.kt", "foobar"),
            ("foo_bar.kt", "foobar"),
            ("foo_bar", "foobar"),
            ("My-Awesome_File.txt", "myawesomefile"),
            ("ShoppingList.kt", "shoppinglist"),
            ("archive.tar.gz", "archivetar"),
            ("scripts/Todo App.kt", "todoapp"),
        ],
    )
    def test_clean_filename(self, file_name, expected):
        """Test the documented cleaning examples."""
        assert clean_filename(file_name) == expected

    @pytest.mark.parametrize("file_name", ["FooBar.kt", "My-Awesome_File.txt", "a.b.c", "___"])
    def test_cleaning_is_idempotent(self, file_name):
        """Cleaning a cleaned name changes nothing."""
        once = clean_filename(file_name)
        assert clean_filename(once) == once

    def test_cleaning_is_case_insensitive(self):
        """Names differing only in case clean to the same value."""
        assert clean_filename("Foo.kt") == clean_filename("foo.kt") == "foo"

    def test_empty_result_is_permitted(self):
        """A name with no alphanumerics cleans to the empty string."""
        identity = PackageIdentity.from_filename("__.kt")
        assert identity.cleaned_name == ""
        assert identity.package_name == "com.quickapp.generated."

    def test_package_identity(self):
        """Test package naming from a file name."""
        identity = PackageIdentity.from_filename("ShoppingList.kt")

        assert identity.package_name == "com.quickapp.generated.shoppinglist"
        assert identity.package_file_name() == "shoppinglist-debug.apk"


class TestAppModels:
    """Tests for app declaration models."""

    def test_widget_defaults(self):
        """Containers and text carry documented defaults."""
        column = ColumnNode()
        text = TextNode(text="Hi")

        assert column.padding == 16
        assert column.spacing == 8
        assert column.children == ()
        assert text.size == 16

    def test_negative_padding_rejected(self):
        """Padding must not be negative."""
        with pytest.raises(ValidationError):
            RowNode(padding=-1)

    def test_models_are_frozen(self):
        """Declarations cannot be mutated after construction."""
        screen = ScreenDeclaration(name="main")
        with pytest.raises(ValidationError):
            screen.name = "other"

    def test_walk_widgets_depth_first(self):
        """Widgets are visited in declaration order, parents first."""
        root = ColumnNode(
            children=(
                TextNode(text="a"),
                RowNode(children=(TextNode(text="b"), TextNode(text="c"))),
                TextNode(text="d"),
            )
        )

        texts = [w.text for w in walk_widgets(root) if isinstance(w, TextNode)]
        assert texts == ["a", "b", "c", "d"]

    def test_screen_inputs_and_actions(self):
        """On-show actions come before button actions."""
        screen = ScreenDeclaration(
            name="main",
            root=ColumnNode(
                children=(
                    InputNode(id="item"),
                    ButtonNode(label="Go", actions=(GoToAction(target="details"),)),
                )
            ),
            on_show=(LogAction(message="shown"),),
        )

        assert [i.id for i in screen.inputs] == ["item"]
        assert [a.kind for a in screen.actions] == ["log", "goTo"]

    def test_action_input_refs(self):
        """Only file and network actions reference inputs."""
        assert action_input_refs(WriteFileAction(path="a.txt", source="note")) == ("note",)
        assert action_input_refs(ReadFileAction(path="a.txt", into="note")) == ("note",)
        assert action_input_refs(HttpGetAction(url="https://example.com")) == ()
        assert action_input_refs(HttpGetAction(url="https://example.com", into="body")) == ("body",)
        assert action_input_refs(ToastAction(message="hi")) == ()

    def test_app_lookup(self):
        """Home is the first screen and lookup is by name."""
        app = AppDeclaration(
            name="Demo",
            screens=(ScreenDeclaration(name="main"), ScreenDeclaration(name="settings")),
        )

        assert app.home.name == "main"
        assert app.screen_names == ["main", "settings"]
        assert app.get_screen("settings").name == "settings"
        assert app.get_screen("missing") is None

    def test_json_round_trip_keeps_action_kinds(self):
        """Discriminated unions survive serialization."""
        screen = ScreenDeclaration(
            name="main",
            root=ButtonNode(label="Save", actions=(WriteFileAction(path="n.txt", source="note"),)),
        )

        restored = ScreenDeclaration.model_validate_json(screen.model_dump_json())
        assert isinstance(restored.root, ButtonNode)
        assert isinstance(restored.root.actions[0], WriteFileAction)


class TestCodegenModels:
    """Tests for code generation models."""

    def test_dependency_declaration(self):
        """Test Gradle dependency rendering."""
        dep = GradleDependency(group="androidx.core", artifact="core-ktx", version="1.12.0")

        assert dep.scope == DependencyScope.IMPLEMENTATION
        assert dep.declaration == 'implementation("androidx.core:core-ktx:1.12.0")'

    def test_plugin_declaration(self):
        """Test Gradle plugin rendering."""
        plugin = GradlePlugin(plugin_id="com.android.application", version="8.5.0", apply=False)

        assert plugin.declaration == 'id("com.android.application") version "8.5.0" apply false'
        assert GradlePlugin(plugin_id="x").declaration == 'id("x")'

    def test_build_artifact_files(self):
        """Files are listed in insertion order with their paths."""
        artifact = BuildArtifact(
            identity=PackageIdentity.from_filename("Demo.kt"),
            artifacts={"manifest": "<manifest/>", "gradle-properties": "a=b\n"},
            paths={"manifest": "app/src/main/AndroidManifest.xml", "gradle-properties": "gradle.properties"},
        )

        assert artifact.package_name == "com.quickapp.generated.demo"
        assert artifact.text(ArtifactName.MANIFEST) == "<manifest/>"
        assert artifact.files() == [
            ("app/src/main/AndroidManifest.xml", "<manifest/>"),
            ("gradle.properties", "a=b\n"),
        ]
