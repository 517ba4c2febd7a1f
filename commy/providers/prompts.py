"""Reformulation prompts."""

# 再構成プロンプト（フランス語出力）
REFORMULATE_PROMPT_FR = """la réponse sera en français. Regroupe et reformule ces commits par date en tâches concises pour un rapport d'activité pour {author}. Garde la structure originale avec les dates. Évite les répétitions et généralise si possible. Réponds uniquement avec les tâches reformulées, sans commentaires explicatifs ni conclusions :
{commits}"""

# 再構成プロンプト（英語出力）
REFORMULATE_PROMPT_EN = """Answer in English. Group and rewrite these commits by date into concise tasks for an activity report for {author}. Keep the original structure with the dates. Avoid repetition and generalize where possible. Reply only with the rewritten tasks, without explanatory comments or conclusions:
{commits}"""

PROMPTS = {
    "fr": REFORMULATE_PROMPT_FR,
    "en": REFORMULATE_PROMPT_EN,
}

DEFAULT_LANGUAGE = "fr"
