import textwrap

import pytest


@pytest.fixture
def posts_dir(tmp_path):
    """A content directory with two posts."""
    directory = tmp_path / "posts"
    directory.mkdir()
    (directory / "a-minor.md").write_text(
        textwrap.dedent(
            """\
            ---
            title: A minor
            description: Notes on the <em>relative</em> minor.
            date: 2024-01-01
            ---

            The **relative** minor shares its key signature.
            """
        ),
        encoding="utf-8",
    )
    (directory / "b-flat.md").write_text(
        textwrap.dedent(
            """\
            ---
            title: B flat
            description: Brass keys
            date: 2024-03-01T09:30:00Z
            ---

            Most brass instruments are pitched in B flat.
            """
        ),
        encoding="utf-8",
    )
    return directory
