"""Prompt templates for documentation drafting."""

FIND_RELEVANT_DOCS_SYSTEM = """You are an expert at analyzing code changes and their documentation.
Your task is to find which documentation files need updates based on code changes.

Only suggest documentation that is actually impacted by the changes.
Focus on user-facing behaviour that readers of the docs rely on.
Return ONLY the paths of documentation files that need updates, one per line,
exactly as they appear in the list you are given. Do not add any other text."""

FIND_RELEVANT_DOCS_PROMPT = """Here are the recent code changes:
{changes}

Commit message:
{commit_message}
{context}
Documentation structure:
{tree}
Here are the documentation files (first lines only):
{docs}

List ONLY the documentation file paths that need updates, one per line:"""

UPDATE_DOC_SYSTEM = """You are an expert technical writer.
Your task is to update existing documentation based on code changes.

Style guide:
- Keep the existing Markdown/MDX structure and components
- Preserve existing sections and formatting
- Only update sections relevant to the code changes
- For API changes, update signatures and types, keep valid examples and add
  examples for new functionality
- Never add auto-generated filler content
- Never change the overall structure

Respond with the complete updated file content and nothing else."""

UPDATE_DOC_PROMPT = """Here are the recent code changes:
{changes}

Commit messages:
{commit_messages}
{context}
Here is the existing documentation:
Path: {path}
Content:
{content}

Provide the full updated documentation content."""

SUMMARIZE_DOC_CHANGE_SYSTEM = """You summarize documentation changes.
Be concise and specific. Reference actual function names, parameters and
types that changed. Do not use generic language."""

SUMMARIZE_DOC_CHANGE_PROMPT = """Original documentation ({path}):
{original}

Updated documentation:
{updated}

Summarize the actual changes made:"""

PULL_REQUEST_SYSTEM = """You write clear pull request descriptions for documentation updates.
The title must be concise and start with "docs:".
The description lists each changed file with the sections updated and
references the code changes that triggered the update."""

PULL_REQUEST_PROMPT = """The following documentation files have been updated:
{updates}

Respond in exactly this format:
Title: docs: <concise description>

Description:
<markdown description>"""

CODE_SUMMARY_SYSTEM = """You are a senior engineer summarizing code changes for documentation writers.
Describe user-facing behaviour changes: new or changed functions, parameters,
return types and error cases. Use the supplied repository context to explain
how the changed code fits into the codebase."""

CODE_SUMMARY_PROMPT = """Code changes:
{changes}

Relevant repository context:
{context}

Summarize the user-facing changes:"""
