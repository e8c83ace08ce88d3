"""Tests for the manifest parsers (no network required)."""

from __future__ import annotations

import pytest

from depwatch.engines.dependency_scanner.models import ExtRef, LiteralVersion, PropertyRef
from depwatch.engines.dependency_scanner.parsers.gradle_build import GradleBuildParser
from depwatch.engines.dependency_scanner.parsers.maven_pom import MavenPomParser
from depwatch.engines.dependency_scanner.parsers.npm_package import NpmPackageParser
from depwatch.engines.dependency_scanner.parsers.pip_requirements import (
    PipRequirementsParser,
    split_requirement,
)
from depwatch.engines.dependency_scanner.registry import (
    PARSER_REGISTRY,
    detect_ecosystem,
    get_parser,
)
from depwatch.exceptions import ManifestParseError, UnsupportedEcosystemError

# ── Parser registry ──────────────────────────────────────────────────────


class TestRegistry:
    def test_all_parsers_registered(self):
        assert set(PARSER_REGISTRY) == {"nodejs", "java", "gradle", "python"}

    @pytest.mark.parametrize("tag", ["java", "JAVA", "Java", " gradle "])
    def test_get_parser_case_insensitive(self, tag):
        assert get_parser(tag).ecosystem == tag.strip().lower()

    def test_get_parser_unknown(self):
        with pytest.raises(UnsupportedEcosystemError) as exc_info:
            get_parser("rust")
        assert exc_info.value.language == "rust"

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("package.json", "nodejs"),
            ("pom.xml", "java"),
            ("build.gradle", "gradle"),
            ("build.gradle.kts", "gradle"),
            ("requirements.txt", "python"),
            ("requirements-dev.txt", "python"),
            ("Cargo.toml", None),
        ],
    )
    def test_detect_ecosystem(self, filename, expected):
        assert detect_ecosystem(filename) == expected


# ── NpmPackageParser ─────────────────────────────────────────────────────


class TestNpmPackageParser:
    @pytest.fixture
    def parser(self):
        return NpmPackageParser()

    def test_both_sections(self, parser):
        content = (
            '{"name": "app", "dependencies": {"express": "^4.18.2", "axios": "~1.6.0"},'
            ' "devDependencies": {"jest": "29.7.0"}}'
        )
        manifest = parser.parse(content)
        assert [(d.name, d.scope) for d in manifest.dependencies] == [
            ("express", "dependencies"),
            ("axios", "dependencies"),
            ("jest", "devDependencies"),
        ]
        assert manifest.dependencies[0].version == LiteralVersion("^4.18.2")
        assert dict(manifest.table) == {}

    def test_missing_sections(self, parser):
        manifest = parser.parse('{"name": "empty"}')
        assert manifest.dependencies == ()

    def test_null_section(self, parser):
        manifest = parser.parse('{"dependencies": null}')
        assert manifest.dependencies == ()

    def test_invalid_json(self, parser):
        with pytest.raises(ManifestParseError, match="Failed to parse dependencies"):
            parser.parse("{not json")

    def test_non_object_document(self, parser):
        with pytest.raises(ManifestParseError):
            parser.parse('["express"]')

    def test_section_not_object(self, parser):
        with pytest.raises(ManifestParseError):
            parser.parse('{"dependencies": ["express"]}')

    def test_resolved_versions_are_direct(self, parser):
        resolved = parser.resolve(parser.parse('{"dependencies": {"lodash": "4.17.21"}}'))
        assert resolved[0].declared_version == "4.17.21"
        assert resolved[0].resolution_source == "direct"


# ── MavenPomParser ───────────────────────────────────────────────────────

POM_NS = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>org.springframework.boot</groupId>
    <artifactId>spring-boot-starter-parent</artifactId>
    <version>2.1.0</version>
  </parent>
  <artifactId>demo</artifactId>
  <properties>
    <app.version>1.0.0</app.version>
    <guava.version>32.1.3-jre</guava.version>
  </properties>
  <dependencies>
    <dependency>
      <groupId>com.example</groupId>
      <artifactId>app-core</artifactId>
      <version>${app.version}</version>
    </dependency>
    <dependency>
      <groupId>org.springframework.boot</groupId>
      <artifactId>spring-boot-starter-web</artifactId>
    </dependency>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
      <scope>test</scope>
    </dependency>
    <dependency>
      <groupId>com.example</groupId>
      <artifactId>ghost</artifactId>
      <version>${missing.version}</version>
    </dependency>
  </dependencies>
  <build>
    <plugins>
      <plugin>
        <artifactId>maven-surefire-plugin</artifactId>
        <dependencies>
          <dependency>
            <artifactId>plugin-only</artifactId>
            <version>1.0</version>
          </dependency>
        </dependencies>
      </plugin>
    </plugins>
  </build>
</project>
"""


class TestMavenPomParser:
    @pytest.fixture
    def parser(self):
        return MavenPomParser()

    def test_extracts_direct_dependencies_only(self, parser):
        manifest = parser.parse(POM_NS)
        names = [d.name for d in manifest.dependencies]
        assert names == ["app-core", "spring-boot-starter-web", "junit", "ghost"]

    def test_version_expressions(self, parser):
        deps = {d.name: d for d in parser.parse(POM_NS).dependencies}
        assert deps["app-core"].version == PropertyRef(name="app.version", raw="${app.version}")
        assert deps["spring-boot-starter-web"].version is None
        assert deps["junit"].version == LiteralVersion("4.13.2")
        assert deps["junit"].scope == "test"
        assert deps["junit"].group_id == "junit"

    def test_properties_and_parent(self, parser):
        manifest = parser.parse(POM_NS)
        assert manifest.table["app.version"] == "1.0.0"
        assert manifest.table["guava.version"] == "32.1.3-jre"
        assert manifest.parent_version == "2.1.0"
        assert manifest.metadata == {
            "parentInfo": {
                "groupId": "org.springframework.boot",
                "artifactId": "spring-boot-starter-parent",
                "version": "2.1.0",
            }
        }

    def test_implicit_project_version(self, parser):
        manifest = parser.parse(POM_NS)
        # no <version> on the project itself, inherited from the parent
        assert manifest.table["project.version"] == "2.1.0"
        assert manifest.table["project.parent.version"] == "2.1.0"

    def test_resolution(self, parser):
        resolved = {d.name: d for d in parser.resolve(parser.parse(POM_NS))}

        assert resolved["app-core"].declared_version == "1.0.0"
        assert resolved["app-core"].resolution_source == "property"

        assert resolved["spring-boot-starter-web"].declared_version == "2.1.0"
        assert resolved["spring-boot-starter-web"].resolution_source == "parent"

        assert resolved["junit"].declared_version == "4.13.2"
        assert resolved["junit"].resolution_source == "direct"

    def test_unresolved_property_does_not_fall_back_to_parent(self, parser):
        resolved = {d.name: d for d in parser.resolve(parser.parse(POM_NS))}
        assert resolved["ghost"].declared_version == "unknown"
        assert resolved["ghost"].resolution_source == "property"

    def test_composite_property_version(self, parser):
        content = """
        <project>
          <properties><major>1</major><minor>2</minor></properties>
          <dependencies>
            <dependency>
              <groupId>a</groupId><artifactId>b</artifactId>
              <version>${major}.${minor}</version>
            </dependency>
            <dependency>
              <groupId>a</groupId><artifactId>c</artifactId>
              <version>${major}.${patch}</version>
            </dependency>
          </dependencies>
        </project>
        """
        manifest = parser.parse(content)
        assert manifest.dependencies[0].version == PropertyRef(
            name="major", raw="${major}.${minor}"
        )
        resolved = {d.name: d for d in parser.resolve(manifest)}
        assert (resolved["b"].declared_version, resolved["b"].resolution_source) == (
            "1.2",
            "property",
        )
        assert (resolved["c"].declared_version, resolved["c"].resolution_source) == (
            "unknown",
            "property",
        )

    def test_no_namespace_no_parent(self, parser):
        content = """
        <project>
          <dependencies>
            <dependency><groupId>a</groupId><artifactId>b</artifactId></dependency>
            <dependency><groupId>c</groupId><version>1.0</version></dependency>
          </dependencies>
        </project>
        """
        manifest = parser.parse(content)
        # entry without artifactId is skipped
        assert [d.name for d in manifest.dependencies] == ["b"]
        assert manifest.metadata == {"parentInfo": None}

        resolved = parser.resolve(manifest)
        assert resolved[0].declared_version == "unknown"
        assert resolved[0].resolution_source == "unspecified"

    def test_no_dependencies_section(self, parser):
        assert parser.parse("<project/>").dependencies == ()

    def test_invalid_xml(self, parser):
        with pytest.raises(ManifestParseError, match="invalid XML"):
            parser.parse("<project><dependencies>")

    def test_explicit_property_overrides_implicit(self, parser):
        content = """
        <project>
          <version>3.0.0</version>
          <properties><project.version>9.9.9</project.version></properties>
          <dependencies>
            <dependency><artifactId>x</artifactId><version>${project.version}</version></dependency>
          </dependencies>
        </project>
        """
        resolved = parser.resolve(parser.parse(content))
        assert resolved[0].declared_version == "9.9.9"


# ── GradleBuildParser ────────────────────────────────────────────────────

GRADLE = """
plugins {
    id 'java'
}

ext {
    appVersion = "1.2.3"
    guavaVersion = '32.1.3-jre'
}

dependencies {
    implementation 'com.x:y:$appVersion'
    implementation "com.google.guava:guava:${guavaVersion}"
    api 'org.slf4j:slf4j-api:2.0.9'
    testImplementation 'junit:junit:4.13.2'
    runtimeOnly 'com.h2database:h2:$missing'
    // implementation 'commented:out:1.0'
    implementation project(':core')
}
"""


class TestGradleBuildParser:
    @pytest.fixture
    def parser(self):
        return GradleBuildParser()

    def test_ext_block_variables(self, parser):
        manifest = parser.parse(GRADLE)
        assert dict(manifest.table) == {"appVersion": "1.2.3", "guavaVersion": "32.1.3-jre"}

    def test_dependency_lines(self, parser):
        deps = parser.parse(GRADLE).dependencies
        assert [(d.scope, d.group_id, d.name) for d in deps] == [
            ("implementation", "com.x", "y"),
            ("implementation", "com.google.guava", "guava"),
            ("api", "org.slf4j", "slf4j-api"),
            ("testImplementation", "junit", "junit"),
            ("runtimeOnly", "com.h2database", "h2"),
        ]
        assert deps[0].version == ExtRef(name="appVersion", raw="$appVersion")
        assert deps[1].version == ExtRef(name="guavaVersion", raw="${guavaVersion}")
        assert deps[2].version == LiteralVersion("2.0.9")

    def test_resolution(self, parser):
        resolved = {d.name: d for d in parser.resolve(parser.parse(GRADLE))}
        assert resolved["y"].declared_version == "1.2.3"
        assert resolved["y"].resolution_source == "ext"
        assert resolved["guava"].declared_version == "32.1.3-jre"
        assert resolved["slf4j-api"].resolution_source == "direct"

    def test_unresolved_variable_kept_unchanged(self, parser):
        resolved = {d.name: d for d in parser.resolve(parser.parse(GRADLE))}
        assert resolved["h2"].declared_version == "$missing"
        assert resolved["h2"].resolution_source == "ext"

    def test_single_line_ext_block(self, parser):
        content = "ext { appVersion = \"1.2.3\" }\nimplementation 'com.x:y:$appVersion'\n"
        resolved = parser.resolve(parser.parse(content))
        assert resolved[0].declared_version == "1.2.3"

    def test_quoted_brace_does_not_close_ext_block(self, parser):
        content = (
            "ext {\n"
            "    kotlinVersion = '1.9.0'\n"
            '    coroutines = "${kotlinVersion}"\n'
            "    appVersion = '1.2.3'\n"
            "}\n"
            "implementation 'com.x:y:$appVersion'\n"
            "implementation 'org.jetbrains:kotlinx-coroutines:$coroutines'\n"
        )
        manifest = parser.parse(content)
        assert dict(manifest.table) == {
            "kotlinVersion": "1.9.0",
            "coroutines": "${kotlinVersion}",
            "appVersion": "1.2.3",
        }
        resolved = {d.name: d for d in parser.resolve(manifest)}
        assert resolved["y"].declared_version == "1.2.3"
        assert resolved["kotlinx-coroutines"].declared_version == "1.9.0"

    def test_ext_dot_assignment(self, parser):
        content = "ext.kotlinVersion = '1.9.20'\nimplementation 'org.jetbrains:kotlin:$kotlinVersion'\n"
        resolved = parser.resolve(parser.parse(content))
        assert resolved[0].declared_version == "1.9.20"

    def test_kotlin_dsl(self, parser):
        content = 'dependencies {\n    implementation("io.ktor:ktor-server-core:2.3.6")\n}\n'
        deps = parser.parse(content).dependencies
        assert len(deps) == 1
        assert deps[0].group_id == "io.ktor"
        assert deps[0].version == LiteralVersion("2.3.6")

    def test_assignment_outside_ext_ignored(self, parser):
        content = "version = '0.1.0'\nimplementation 'a:b:$version'\n"
        resolved = parser.resolve(parser.parse(content))
        assert resolved[0].declared_version == "$version"

    def test_coordinate_without_version_skipped(self, parser):
        assert parser.parse("implementation 'a:b'\n").dependencies == ()


# ── PipRequirementsParser ────────────────────────────────────────────────


class TestSplitRequirement:
    @pytest.mark.parametrize(
        "clause,expected",
        [
            ("requests>=2.0,<3.0", ("requests", "2.0", "minimum")),
            ("flask==2.3.1", ("flask", "2.3.1", "exact")),
            ("numpy>1.20", ("numpy", "1.20", "greater")),
            ("django<=4.2", ("django", "4.2", "maximum")),
            ("urllib3<2", ("urllib3", "2", "less")),
            ("black", ("black", None, "none")),
            ("foo!=1.0", ("foo", None, "none")),
            ("requests[security] >= 2.31", ("requests", "2.31", "minimum")),
            ("python_version >= '3.8'", ("python_version", "3.8", "minimum")),
        ],
    )
    def test_split(self, clause, expected):
        assert split_requirement(clause) == expected


class TestPipRequirementsParser:
    @pytest.fixture
    def parser(self):
        return PipRequirementsParser()

    def test_skips_comments_blanks_and_options(self, parser):
        content = (
            "# comment\n\nflask==1.0\n  \n-r base.txt\n--index-url https://pypi.org\n"
            "-i https://mirror.example/simple\n-f ./wheels\n--trusted-host mirror.example\n"
            "requests  # http client\n"
        )
        deps = parser.parse(content).dependencies
        assert [d.name for d in deps] == ["flask", "requests"]

    def test_environment_marker_ignored(self, parser):
        deps = parser.parse('pywin32==306; sys_platform == "win32"\n').dependencies
        assert len(deps) == 1
        assert deps[0].name == "pywin32"
        assert deps[0].version == LiteralVersion("306")

    def test_unspecified(self, parser):
        resolved = parser.resolve(parser.parse("black\n"))
        assert resolved[0].declared_version == "unspecified"
        assert resolved[0].constraint_type == "none"
        assert resolved[0].resolution_source == "unspecified"

    def test_constraint_type_carried_through(self, parser):
        resolved = parser.resolve(parser.parse("requests>=2.0,<3.0\n"))
        assert resolved[0].name == "requests"
        assert resolved[0].declared_version == "2.0"
        assert resolved[0].constraint_type == "minimum"
