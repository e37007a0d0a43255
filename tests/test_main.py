"""
TestGenerator 통합 테스트 (LLM 클라이언트는 mock)
"""
from unittest.mock import MagicMock

import pytest

from llm_testgen.core.llm_client import CompletionClient, CompletionError
from llm_testgen.core.source_models import TestCase
from llm_testgen.languages import GoProfile, PythonProfile
from llm_testgen.main import TestGenerator

GO_SOURCE = """package sample

func sum(a, b int) int {
    return a + b
}

func existing() bool {
    return true
}

func main() {
    _ = sum(1, 2)
}
"""

GO_EXISTING_TESTS = 'package sample\n\nimport (\n\t"testing"\n)\n\nfunc TestExisting(t *testing.T) {}\n'

PYTHON_SOURCE = """def add(a, b):
    return a + b


def main():
    print(add(1, 2))
"""


def _fake_test_case(package_name, function, profile):
    if isinstance(profile, PythonProfile):
        return TestCase(
            name=function.name,
            code=f"def test_{function.name}():\n    assert {function.name}(1, 2) == 3",
            imports=[f"from {package_name} import {function.name}"]
        )
    return TestCase(
        name=function.name,
        code=f"func {profile.test_name(function.name)}(t *testing.T) {{}}",
        imports=['"fmt"']
    )


@pytest.fixture
def fake_client():
    client = MagicMock(spec=CompletionClient)
    client.generate_test_case.side_effect = _fake_test_case
    return client


@pytest.fixture
def go_project(tmp_path):
    (tmp_path / "sample.go").write_text(GO_SOURCE)
    (tmp_path / "sample_test.go").write_text(GO_EXISTING_TESTS)
    return tmp_path


class TestTestGenerator:
    """파일 단위 파이프라인 테스트"""

    def test_generate_go_tests(self, config, fake_client, go_project):
        """main 과 기존 테스트는 건너뛰고 나머지만 요청"""
        generator = TestGenerator(config, client=fake_client)

        result = generator.generate(go_project)

        source = str(go_project / "sample.go")
        assert result.success
        assert result.files_processed == [source]
        assert result.generated_tests == [f"{source}::sum"]
        assert result.skipped_tests == [f"{source}::existing"]
        assert result.output_files == [str(go_project / "sample_test.go")]

        fake_client.generate_test_case.assert_called_once()
        package_name, function, profile = fake_client.generate_test_case.call_args.args
        assert package_name == "sample"
        assert function.name == "sum"
        assert isinstance(profile, GoProfile)

        content = (go_project / "sample_test.go").read_text()
        assert content.startswith('package sample\n\nimport (\n\t"testing"\n\t"fmt"\n)\n')
        assert "func TestExisting(t *testing.T) {}" in content
        assert content.endswith("// Test case for function sum\nfunc TestSum(t *testing.T) {}\n\n")

    def test_second_run_skips_generated_tests(self, config, fake_client, go_project):
        """두 번째 실행에서는 이미 생성된 테스트를 다시 요청하지 않음"""
        generator = TestGenerator(config, client=fake_client)
        generator.generate(go_project)
        first_content = (go_project / "sample_test.go").read_text()

        result = generator.generate(go_project)

        assert result.generated_tests == []
        assert len(result.skipped_tests) == 2
        assert result.output_files == []
        assert fake_client.generate_test_case.call_count == 1
        assert (go_project / "sample_test.go").read_text() == first_content

    def test_long_functions_are_skipped(self, config, fake_client, go_project):
        config.app.max_function_lines = 2
        generator = TestGenerator(config, client=fake_client)

        result = generator.generate(go_project)

        fake_client.generate_test_case.assert_not_called()
        assert result.generated_tests == []
        assert (go_project / "sample_test.go").read_text() == GO_EXISTING_TESTS

    def test_completion_error_skips_only_that_function(self, config, fake_client, tmp_path):
        (tmp_path / "sample.go").write_text(
            "package sample\n\nfunc a() {}\n\nfunc b() {}\n"
        )

        def flaky(package_name, function, profile):
            if function.name == "a":
                raise CompletionError("boom")
            return _fake_test_case(package_name, function, profile)

        fake_client.generate_test_case.side_effect = flaky
        generator = TestGenerator(config, client=fake_client)

        result = generator.generate(tmp_path)

        assert not result.success
        assert len(result.errors) == 1
        assert "function a" in result.errors[0]
        assert result.generated_tests == [f"{tmp_path / 'sample.go'}::b"]
        content = (tmp_path / "sample_test.go").read_text()
        assert "func TestB(t *testing.T) {}" in content
        assert "TestA" not in content

    def test_parse_error_skips_file(self, config, fake_client, tmp_path):
        (tmp_path / "broken.go").write_text('package sample\n\nfunc broken() {\n    s := "oops\n}\n')
        (tmp_path / "ok.go").write_text("package sample\n\nfunc ok() {}\n")
        generator = TestGenerator(config, client=fake_client)

        result = generator.generate(tmp_path)

        assert len(result.errors) == 1
        assert "Error parsing file" in result.errors[0]
        assert result.files_processed == [str(tmp_path / "ok.go")]
        assert (tmp_path / "ok_test.go").exists()
        assert not (tmp_path / "broken_test.go").exists()

    def test_dry_run(self, config, fake_client, go_project):
        """dry-run 은 요청/기록 없이 대상만 수집"""
        generator = TestGenerator(config, client=fake_client)

        result = generator.generate(go_project, dry_run=True)

        assert result.pending_tests == [f"{go_project / 'sample.go'}::sum"]
        fake_client.generate_test_case.assert_not_called()
        assert (go_project / "sample_test.go").read_text() == GO_EXISTING_TESTS

    def test_missing_path(self, config, fake_client, tmp_path):
        result = TestGenerator(config, client=fake_client).generate(tmp_path / "missing")

        assert not result.success
        assert "Path not found" in result.errors[0]
        assert result.execution_time is not None

    def test_python_project(self, config, fake_client, tmp_path):
        package_dir = tmp_path / "pkg"
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("")
        (package_dir / "mathx.py").write_text(PYTHON_SOURCE)
        config.app.languages = ["python"]
        generator = TestGenerator(config, client=fake_client)

        result = generator.generate(tmp_path)

        assert result.generated_tests == [f"{package_dir / 'mathx.py'}::add"]
        assert (package_dir / "test_mathx.py").read_text() == (
            "import pytest\n"
            "from pkg.mathx import add\n"
            "\n"
            "\n"
            "# Test case for function add\n"
            "def test_add():\n"
            "    assert add(1, 2) == 3\n"
            "\n"
            "\n"
        )

    def test_summary_dict(self, config, fake_client, go_project):
        summary = TestGenerator(config, client=fake_client).generate(go_project).to_summary_dict()

        assert summary["total_files_processed"] == 1
        assert summary["total_tests_generated"] == 1
        assert summary["total_tests_skipped"] == 1
        assert summary["success"] is True
