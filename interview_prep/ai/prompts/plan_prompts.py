"""
Plan generation prompts for the {SYSTEM_NAME} platform.

These templates ask the model for the learning and practice sections of a
preparation plan. Every template demands a single JSON object whose keys match
the shapes in interview_prep.ai.schemas.
"""

TOPIC_ITEM_SHAPE = """{{"topic": string, "category": one of "data-structures" | "algorithms" | "system-design" | "behavioral" | "domain-knowledge" | "company-values", "priority": integer 1-5, "resources": [{{"title": string, "url": full URL, "type": one of "article" | "video" | "course" | "documentation" | "book", "recommendation": one of "best" | "good" | "average", "recommended_order": integer starting at 1}}]}}"""

QUESTION_ITEM_SHAPE = """{{"question": string, "answer": string (an expert sample answer), "category": one of "behavioral" | "technical" | "situational" | "company-specific" | "general", "difficulty": one of "easy" | "medium" | "hard", "keywords": [string]}}"""

PROBLEM_ITEM_SHAPE = """{{"title": string, "url": full URL, "source": one of "leetcode" | "hackerrank" | "codewars" | "custom" | "other", "difficulty": one of "easy" | "medium" | "hard"}}"""

STORY_ITEM_SHAPE = """{{"prompt": string, "situation": string, "task": string, "action": string, "result": string, "keywords": [string]}}"""

PLAN_CONTEXT = """
You are an expert career coach preparing a candidate for a "{role}" interview at "{company}".
Role level: {level}. Candidate experience level: {experience_level}.
Plan title: {title}
{description}
"""

CREATE_PLAN_PROMPT = PLAN_CONTEXT + """
Build the initial preparation plan. Include:
1. 5 to 8 study topics ordered by importance, each with 2 to 3 high-quality resources.
2. 5 prepared interview questions mixing behavioral and technical questions, each with a sample answer.
3. 5 practice problems suited to the role and level.
4. 3 story-bank prompts in STAR format the candidate can adapt.

Your output MUST be a single valid JSON object with exactly these keys:
"study_topics": [""" + TOPIC_ITEM_SHAPE + """],
"prepared_questions": [""" + QUESTION_ITEM_SHAPE + """],
"practice_problems": [""" + PROBLEM_ITEM_SHAPE + """],
"story_bank": [""" + STORY_ITEM_SHAPE + """]

Do not wrap the JSON in markdown. No trailing commas.
"""

MORE_LEARNING_PROMPT = PLAN_CONTEXT + """
The plan already covers these study topics (do NOT repeat them):
{existing_topics}

And these prepared questions (do NOT repeat them):
{existing_questions}

Generate 3 to 5 NEW study topics with resources and 3 NEW prepared questions.

Your output MUST be a single valid JSON object with exactly these keys:
"study_topics": [""" + TOPIC_ITEM_SHAPE + """],
"prepared_questions": [""" + QUESTION_ITEM_SHAPE + """]
"""

MORE_PRACTICE_PROMPT = PLAN_CONTEXT + """
The plan already contains these practice problems (do NOT repeat them):
{existing_problems}

And these story-bank prompts (do NOT repeat them):
{existing_stories}

Generate 3 to 5 NEW practice problems and 2 NEW story-bank prompts.

Your output MUST be a single valid JSON object with exactly these keys:
"practice_problems": [""" + PROBLEM_ITEM_SHAPE + """],
"story_bank": [""" + STORY_ITEM_SHAPE + """]
"""

MORE_QUESTIONS_PROMPT = PLAN_CONTEXT + """
The plan already contains these prepared questions (do NOT repeat them):
{existing_questions}

Generate 5 NEW interview questions with a mix of behavioral and technical questions, each with a detailed expert sample answer.

Your output MUST be a single valid JSON object with exactly one key:
"prepared_questions": [""" + QUESTION_ITEM_SHAPE + """]
"""
