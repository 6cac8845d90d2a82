"""Shared test fixtures — sample diffs, status text, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_diff_added() -> str:
    """A diff that adds a new file."""
    return textwrap.dedent("""\
        diff --git a/hello.py b/hello.py
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.py
        @@ -0,0 +1,3 @@
        +def greet(name):
        +    return f"Hello, {name}!"
        +
    """)


@pytest.fixture
def sample_diff_modified() -> str:
    """Old side: 1 removed + 2 context = 3. New side: 2 context + 2 added = 4."""
    return textwrap.dedent("""\
        diff --git a/notes.txt b/notes.txt
        index 1234567..abcdef0 100644
        --- a/notes.txt
        +++ b/notes.txt
        @@ -1,3 +1,4 @@
        -alpha
         beta
         gamma
        +delta
        +epsilon
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    return textwrap.dedent("""\
        diff --git a/gone.txt b/gone.txt
        deleted file mode 100644
        index 1234567..0000000
        --- a/gone.txt
        +++ /dev/null
        @@ -1,2 +0,0 @@
        -first
        -second
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        index 0000000..abc1234
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A diff with a renamed file."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only file mode change."""
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """A diff with 'No newline at end of file' marker."""
    return textwrap.dedent("""\
        diff --git a/data.txt b/data.txt
        index 1234567..abc1234 100644
        --- a/data.txt
        +++ b/data.txt
        @@ -1 +1 @@
        -final line without newline
        \\ No newline at end of file
        +final line, now terminated
    """)


@pytest.fixture
def sample_diff_header_lookalikes() -> str:
    """Body lines that read like file markers when their prefix is included."""
    return textwrap.dedent("""\
        diff --git a/sig.txt b/sig.txt
        index 1234567..abc1234 100644
        --- a/sig.txt
        +++ b/sig.txt
        @@ -1,2 +1,2 @@
        --- a/fake
        +++ b/fake
         --
    """)


@pytest.fixture
def sample_show() -> str:
    """``git show`` output: commit header, message, then the diff."""
    return textwrap.dedent("""\
        commit 3f2a9c1d0e4b5a6978c1d2e3f4a5b6c7d8e9f0a1
        Author: Test <test@test.com>
        Date:   Mon Jan 1 00:00:00 2024 +0000

            Add greeting

            diff --git a/ghost b/ghost is only part of the message.

        diff --git a/hello.py b/hello.py
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.py
        @@ -0,0 +1 @@
        +print("hi")
    """)


@pytest.fixture
def sample_status() -> str:
    return "## main...origin/main [ahead 2]\nM  foo.txt\n?? bar.txt\n"


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository on branch ``main`` with one commit."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "init")
    return tmp_path


@pytest.fixture
def git(tmp_git_repo: Path):
    """Run a git command in ``tmp_git_repo``."""
    def run(*args: str) -> None:
        _git(tmp_git_repo, *args)
    return run
