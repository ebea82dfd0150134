"""Prompt composition.

The instruction text comes from a template (see config.load_template); the
PR section below it is always rendered the same way so that every template
sees identical PR data.
"""

from __future__ import annotations

from prqa_core.context import ChangedFile, PRContext


def _render_file(index: int, f: ChangedFile) -> str:
    return f"""
{index}. {f.filename} ({f.status}) +{f.additions}/-{f.deletions}
PATCH:
{f.patch}
"""


def compose_prompt(instructions: str, context: PRContext) -> str:
    meta = context.metadata
    files_section = "\n".join(_render_file(i, f) for i, f in enumerate(context.files, 1))
    prompt = f"""
{instructions.strip()}

PR title: {meta.title}
PR author: {meta.author}
Base: {meta.base_ref}  Head: {meta.head_ref}
PR url: {meta.url}

Changed files (with patches, may be truncated):
{files_section}
"""
    return prompt.strip()
