"""Root test configuration: a throwaway content tree and logging isolation"""

import logging
import os
from pathlib import Path

import pytest

from univault.config import Settings


POST_A = """\
---
title: First Light
date: 2024-1-5
author: Ada
tags: [research, math]
image: /images/cover.png
---

The opening paragraph of the first post.

Inline math \\(e^{i\\pi} + 1 = 0\\) and display math:

\\[
\\int_0^1 x\\,dx
\\]
"""

POST_B = """\
---
title: Second Post
date: 2024-03-10
tags: research, updates
---

Second post body.
"""

POST_UNDATED = """\
---
title: Undated Draft
date: not-a-date
image: /images/missing.png
---

Draft body.
"""

THEORY = """\
---
title: Harmonic Basics
date: 2023-12-01
tags: [theory]
---

# Harmonic Basics

Intro text.
"""

ABOUT = """\
---
title: About
features:
  - Open research
research:
  - title: Main Question
---

# About

We build personal AI.

- Fragmented data
- Opaque models

## Vision

- Sovereign data
- Harmonic systems
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI runs call logging.basicConfig(force=True); put the root handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(name="site")
def site_fixture(tmp_path, monkeypatch) -> Path:
    """A small content store + public dir under tmp_path, with tmp_path as cwd."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("UNIVAULT_"):
            monkeypatch.delenv(name)

    write(tmp_path / "content/posts/first-light.md", POST_A)
    write(tmp_path / "content/posts/second-post.md", POST_B)
    write(tmp_path / "content/posts/undated.md", POST_UNDATED)
    write(tmp_path / "content/paiTraining/Theory/Foundations/harmonic-basics.mdx", THEORY)
    write(tmp_path / "content/pages/about.md", ABOUT)
    write(tmp_path / "public/images/cover.png", "png")
    return tmp_path


@pytest.fixture(name="settings")
def settings_fixture(site) -> Settings:
    return Settings(
        content_dir=str(site / "content"),
        public_dir=str(site / "public"),
        output_dir=str(site / "out"),
        site_url="https://example.org",
    )
