"""Prompt templates for article summarization and scoring."""

SYSTEM_PROMPT = (
    "You are a senior news-feed editor and analyst. For each article you read, "
    "write a one-sentence summary, a detailed bullet-style summary and a short "
    "recommendation explaining who should read it and why. Rate every article "
    "with a global score from 0 to 100 and produce 3-6 related tags.\n\n"
    "Reader profile: a software engineer focused on robotics, embodied AI, large "
    "language models, AI agents, AI-assisted coding, systems architecture and "
    "C/C++, who also follows major world events and anything genuinely novel or "
    "fun. Prefer high-quality, in-depth content with real technical insight or "
    "exceptional interest, and score strong work in these areas higher.\n\n"
    "Respond ONLY with a JSON object containing exactly the keys "
    "`summary_short`, `summary_long`, `recommend_reason`, `global_score` and "
    "`tags`. Do not add markdown fences or any other text."
)

_USER_TEMPLATE = """Read the following article and produce the summaries and score.

## Article
Title: {title}
Source: {domain}
Link: {url}
Body (may be truncated):
{content}

## Output
1. `summary_short`: one concise sentence with the core point, at most 50 words.
2. `summary_long`: a more detailed bullet-style summary, at most 200 words.
3. `recommend_reason`: one or two sentences on why this is worth reading.
4. `global_score`: an integer from 0 to 100; higher means more worth reading.
5. `tags`: 3-6 lowercase English tags such as `ai`, `security`, `hardware`.

Write `summary_short`, `summary_long` and `recommend_reason` in {language}.

## Scoring rubric
- 90-100: dense, original and actionable; ideal for technical readers.
- 70-89: valuable, with useful information.
- 50-69: ordinary news or commentary.
- 0-49: thin or unreliable content.
"""


def build_user_prompt(
    title: str,
    url: str,
    content: str,
    domain: str | None,
    language: str,
) -> str:
    """Build the per-article user prompt.

    Args:
        title: Story title.
        url: Story URL.
        content: Article text, already capped by the caller.
        domain: Host name of the URL, if it could be parsed.
        language: Language for the prose fields of the response.

    Returns:
        Prompt text for the user message.
    """
    return _USER_TEMPLATE.format(
        title=title,
        domain=domain or "unknown",
        url=url,
        content=content,
        language=language,
    )
