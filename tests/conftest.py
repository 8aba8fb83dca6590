import pytest
import tempfile
import textwrap
from pathlib import Path


@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test configs."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d).resolve()


@pytest.fixture
def write_yaml(tmp_dir):
    """Write a dedented YAML document under tmp_dir and return its absolute path."""

    def _write(name: str, content: str = "") -> Path:
        path = tmp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def project_tree(write_yaml):
    """A root config with explicit, templated and pattern imports."""
    root = write_yaml(
        "root.yaml",
        """
        imports:
        - path: base.yaml
        - path: project.yaml
          data:
            PROJECT_ID: example-prod
        - pattern: extra/*.yaml
        data:
          REGION: us-central1
        """,
    )
    write_yaml(
        "base.yaml",
        """
        data:
          REGION: us-east1
          LABELS: [base]
        """,
    )
    write_yaml(
        "project.yaml",
        """
        templates:
        - name: project
          component_path: ../components/project
          data:
            PROJECT_ID: "{{ PROJECT_ID }}"
        """,
    )
    write_yaml("extra/a.yaml", "data:\n  LABELS: [a]\n")
    write_yaml("extra/b.yaml", "data:\n  LABELS: [b]\n")
    return root
