"""Prompt builders for answer generation"""

from one_click_apply.reasoning.classify import (
    FORMAT_LINKEDIN,
    FORMAT_PHONE,
    FORMAT_URL,
    detect_answer_format,
)

JOB_DESCRIPTION_CHARS = 300


def _job_block(context):
    description = (context.job_description or "")[:JOB_DESCRIPTION_CHARS]
    if len(context.job_description or "") > JOB_DESCRIPTION_CHARS:
        description += "..."
    return (
        "Job Information:\n"
        f"- Title: {context.job_title or 'Unknown'}\n"
        f"- Company: {context.company or 'Unknown'}\n"
        f"- Description: {description or 'Not provided'}"
    )


def build_select_prompt(question, context):
    options = "\n".join(
        f"{i}. {label}" for i, label in enumerate(question.option_labels, 1)
    )
    return f"""You are helping a job candidate answer an application question.

Question: {question.text}
{'(Required)' if question.required else '(Optional)'}

Available options:
{options}

{_job_block(context)}

Candidate Profile:
{context.profile_text or 'Not provided'}

Please select the MOST APPROPRIATE option from the list above. Consider the candidate's background and the job requirements.

Respond with ONLY the exact text of the selected option, nothing else."""


def format_rules(question):
    """Per-format rules for the text_field JSON prompt"""
    answer_format = detect_answer_format(question.text)
    rules = []
    if answer_format == FORMAT_PHONE:
        rules.append("- answer must be phone number in format: +1XXXXXXXXXX (digits only, e.g., +15551234567)")
    elif answer_format == FORMAT_LINKEDIN:
        rules.append("- answer must be full LinkedIn URL (e.g., https://linkedin.com/in/username)")
    elif answer_format == FORMAT_URL:
        rules.append("- answer must be full URL starting with https://")
    else:
        rules.append("- answer must be brief, professional response (max 2 sentences)")
    if question.max_length:
        rules.append(f"- answer must be at most {question.max_length} characters")
    if question.min_length:
        rules.append(f"- answer must be at least {question.min_length} characters")
    return rules


def build_text_prompt(question, context):
    rules = "\n".join(format_rules(question))
    return f"""<task>Extract the answer value for a job application question from the candidate's profile.</task>

<question>{question.text}</question>

<candidate_profile>
{context.profile_text or 'Not provided'}
</candidate_profile>

<job>
{_job_block(context)}
</job>

<output_format>
Return ONLY valid JSON with NO other text before or after:
{{
  "answer": "value",
  "confidence": 0.85
}}
</output_format>

<rules>
{rules}
- confidence: number between 0.0-1.0
- Return ONLY the JSON object, nothing else
- Do NOT add explanations, reasoning, or any text outside the JSON
</rules>

<example_output>
{{"answer": "+15551234567", "confidence": 0.9}}
</example_output>"""
