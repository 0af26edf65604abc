"""
Unit tests for the glide importer.
"""

import pytest

from conftest import DEPTEST, DEPTEST_MASTER_REV, DEPTEST_V1_REV, DEPTESTDOS, DEPTESTDOS_V2_REV
from depconvert.core.converter import EmptyRevisionError
from depconvert.importers.base import ImporterLoadError
from depconvert.importers.glide import GlideImporter

GLIDE_YAML = f"""
package: github.com/me/project
ignore:
  - github.com/me/project/generated
excludeDirs:
  - samples
import:
  - package: {DEPTEST}
    version: v0.8.0
    repo: https://github.com/fork/deptest.git
testImport:
  - package: {DEPTESTDOS}
    version: v2.0.0
"""

GLIDE_LOCK = f"""
hash: 16053c82a71f9bd509b05a4523df6bc418aed2083e4b8bd97a870bbc003256f8
imports:
  - name: {DEPTEST}
    version: {DEPTEST_V1_REV}
testImports:
  - name: {DEPTESTDOS}
    version: {DEPTESTDOS_V2_REV}
"""


@pytest.fixture
def importer(provider):
    return GlideImporter(provider)


class TestParse:

    def test_lock_supplies_revisions(self, importer):
        config = importer.parse(GLIDE_YAML, GLIDE_LOCK)

        deptest, deptestdos = config.records
        assert deptest.import_path == DEPTEST
        assert deptest.revision == DEPTEST_V1_REV
        assert deptest.version_label == "v0.8.0"
        assert deptest.source == "https://github.com/fork/deptest.git"
        assert deptestdos.revision == DEPTESTDOS_V2_REV

    def test_ignore_and_exclude_dirs(self, importer):
        config = importer.parse(GLIDE_YAML, GLIDE_LOCK)

        assert config.ignored == ["github.com/me/project/generated"]
        assert config.exclude_dirs == ["samples"]
        assert config.ignored_packages("github.com/me/project") == [
            "github.com/me/project/generated",
            "github.com/me/project/samples",
        ]

    def test_without_lock_a_commit_id_is_the_revision(self, importer):
        yaml_text = f"import:\n  - package: {DEPTEST}\n    version: {DEPTEST_MASTER_REV}\n"

        config = importer.parse(yaml_text)

        assert config.records[0].revision == DEPTEST_MASTER_REV
        assert config.records[0].version_label == ""

    def test_without_lock_a_tag_leaves_revision_empty(self, importer):
        config = importer.parse(f"import:\n  - package: {DEPTEST}\n    version: v0.8.0\n")

        assert config.records[0].revision == ""
        assert config.records[0].version_label == "v0.8.0"

    def test_numeric_version_is_read_as_text(self, importer):
        config = importer.parse(f"import:\n  - package: {DEPTEST}\n    version: 1.0\n")

        assert config.records[0].version_label == "1.0"

    def test_os_arch_restriction_warns(self, importer, caplog):
        yaml_text = f"import:\n  - package: {DEPTEST}\n    os: linux\n    arch: [amd64]\n"

        config = importer.parse(yaml_text, GLIDE_LOCK)

        assert len(config.warnings) == 1
        assert "os=linux arch=amd64" in config.warnings[0]
        assert DEPTEST in caplog.text

    def test_empty_documents(self, importer):
        config = importer.parse("", "")

        assert config.records == []
        assert config.ignored == []

    def test_invalid_yaml(self, importer):
        with pytest.raises(ImporterLoadError, match="invalid YAML"):
            importer.parse("import: [unterminated")

    def test_non_mapping_document(self, importer):
        with pytest.raises(ImporterLoadError, match="mapping"):
            importer.parse("- just\n- a list\n")


class TestImportProject:

    def test_with_lock(self, tmp_path, importer):
        (tmp_path / "glide.yaml").write_text(GLIDE_YAML)
        (tmp_path / "glide.lock").write_text(GLIDE_LOCK)

        result = importer.run(tmp_path, "github.com/me/project")

        assert result.manifest.constraints == {DEPTEST: "^0.8.0", DEPTESTDOS: "^2.0.0"}
        assert result.manifest.sources == {DEPTEST: "https://github.com/fork/deptest.git"}
        assert result.manifest.ignored == [
            "github.com/me/project/generated",
            "github.com/me/project/samples",
        ]
        assert [p.root for p in result.lock.projects] == [DEPTEST, DEPTESTDOS]

    def test_without_lock_tag_only_is_structural(self, tmp_path, importer):
        (tmp_path / "glide.yaml").write_text(GLIDE_YAML)

        with pytest.raises(EmptyRevisionError):
            importer.run(tmp_path, "github.com/me/project")

    def test_warnings_are_reported_first(self, tmp_path, importer):
        (tmp_path / "glide.yaml").write_text(
            f"import:\n  - package: {DEPTEST}\n    os: [windows]\n"
            "  - package: github.com/nobody/nothing\n"
        )
        (tmp_path / "glide.lock").write_text(
            f"imports:\n  - name: {DEPTEST}\n    version: {DEPTEST_V1_REV}\n"
            f"  - name: github.com/nobody/nothing\n    version: {DEPTEST_V1_REV}\n"
        )

        result = importer.run(tmp_path, "github.com/me/project")

        assert len(result.warnings) == 2
        assert "os=windows" in result.warnings[0]
        assert "github.com/nobody/nothing" in result.warnings[1]

    def test_range_version_becomes_constraint_unchanged(self, tmp_path, importer):
        (tmp_path / "glide.yaml").write_text(
            f"import:\n  - package: {DEPTEST}\n    version: \">=0.8.0, <2.0.0\"\n"
        )
        (tmp_path / "glide.lock").write_text(
            f"imports:\n  - name: {DEPTEST}\n    version: {DEPTEST_V1_REV}\n"
        )

        result = importer.run(tmp_path, "github.com/me/project")

        assert result.manifest.constraints == {DEPTEST: ">=0.8.0, <2.0.0"}
        assert result.lock.projects[0].to_dict() == {
            "name": DEPTEST,
            "version": "v1.0.0",
            "revision": DEPTEST_V1_REV,
        }
