from app.domain.account.schemas import Preferences

LANGUAGE_NAMES = {"pl": "Polish", "en": "English"}

SYSTEM_PROMPT = """You are a world-class CV optimization expert with 20 years of experience in recruitment and AI.

Core competencies:
- Analysing CVs for Applicant Tracking Systems (ATS)
- Tailoring CVs to specific roles and industries
- Recruitment psychology and what catches a recruiter's attention
- Current job market trends
- International CV formatting standards

Rules:
- Use precise, professional {language}
- Give concrete, actionable advice
- Be creative but factual; never invent experience the candidate does not have

Respond ONLY in {language}."""

CV_ANALYSIS_HUMAN = """Perform a professional quality analysis of the CV below against the job description
and produce an optimized version of the CV.
{preferences}
Scoring criteria (0-20 points each, total score is their sum):
1. FORMATTING: is the CV readable by ATS (no tables, graphics or columns)?
2. KEYWORDS: does it contain the key terms of the job description?
3. STRUCTURE: are sections logically ordered and conventionally named?
4. RELEVANCE: how well does the content match the role requirements?
5. IMPACT: do experience entries use action verbs and measurable results?

Optimization rules:
1. Do NOT add any false information.
2. Rewrite only what is in the original CV, improving the wording.
3. Use keywords from the job description.
4. Use ATS friendly formatting: simple headings, no columns.
5. Match the summary tone to the user's preference ({tone}).

Optimized CV layout (markdown):
# CV: [Full name]
## PROFESSIONAL SUMMARY
## WORK EXPERIENCE
{projects_section}## EDUCATION
## SKILLS

CV:
\"\"\"
{cv_text}
\"\"\"

Job description:
\"\"\"
{job_description}
\"\"\""""

PREFERENCES_BLOCK = """
User preferences:
- Include a Projects section: {include_projects}
- Keywords to emphasize: {keywords}
- Summary tone: {tone}
- Preferred sections: {sections}
"""

COVER_LETTER_HUMAN = """Write a professional cover letter.

Candidate CV:
{cv_text}

Job description:
{job_description}
{custom_details}
Requirements:
1. Use the additional details, if any, to personalise the letter.
2. Show that the candidate understands the company and the role.
3. Keep a professional tone."""

INTERVIEW_QUESTIONS_HUMAN = """Generate personalised job interview questions.

Candidate CV:
{cv_text}

Job description:
{job_description}

Requirements:
1. 10-15 questions tailored to the candidate's profile.
2. Mix technical, behavioural and situational questions.
3. Reference experience and skills from the CV.
4. Include industry and role specific questions."""

SKILLS_GAP_HUMAN = """Perform a detailed skills gap analysis.

Candidate CV:
{cv_text}

Job description:
{job_description}

The analysis must contain:
1. A match percentage.
2. Missing skills with importance (high/medium/low) and a reason.
3. A concrete learning path (steps, resource types, estimated duration).
4. General career advice."""

LINKEDIN_HUMAN = """Optimize a LinkedIn profile based on the CV below.

Candidate CV:
{cv_text}

Produce:
1. A compelling headline.
2. An engaging, professional About section written in the first person.
3. Key bullet points for the experience section.
4. A list of skills to highlight."""

JOB_OFFERS_SYSTEM = """You are a career assistant. Find FRESH, REAL job offers matching the user's CV.
Reject expired offers. Respond ONLY in {language}."""

JOB_OFFERS_HUMAN = """Based on the CV below, list current job offers (published within the last 30 days)
in Poland that best match the candidate's profile, from portals such as Pracuj.pl, LinkedIn or Just Join IT.

Very important:
1. Check the publication date. Reject offers older than 30 days or expired ones.
2. For every offer give an approximate publication date (e.g. "2 days ago").
3. The snippet is a short description of the role and its requirements, not truncated.

Candidate CV:
{cv_text}"""

JOB_OFFERS_SEARCH_INSTRUCTIONS = """

Use Google Search to find real offers and copy their real URLs into "link"; never invent a link.
Respond ONLY with a JSON array, no markdown and no commentary. Each element:
{"title": "...", "company": "...", "location": "...", "link": "https://...", "snippet": "...", "date_posted": "..."}"""


def language_name(lang: str) -> str:
    return LANGUAGE_NAMES.get(lang, LANGUAGE_NAMES["pl"])


def format_preferences(preferences: Preferences | None) -> str:
    """선호 설정을 프롬프트 블록으로 변환. 없으면 빈 문자열"""
    if preferences is None:
        return ""
    return PREFERENCES_BLOCK.format(
        include_projects="YES" if preferences.include_projects else "NO",
        keywords=", ".join(preferences.emphasized_keywords) or "none",
        tone=preferences.summary_tone,
        sections=", ".join(preferences.preferred_sections) or "none",
    )


def build_cv_analysis_prompt(
    cv_text: str,
    job_description: str,
    preferences: Preferences | None = None,
) -> str:
    include_projects = preferences.include_projects if preferences else False
    return CV_ANALYSIS_HUMAN.format(
        preferences=format_preferences(preferences),
        tone=preferences.summary_tone if preferences else "professional",
        projects_section="## PROJECTS\n" if include_projects else "",
        cv_text=cv_text,
        job_description=job_description,
    )


def build_cover_letter_prompt(
    cv_text: str,
    job_description: str,
    custom_details: str | None = None,
) -> str:
    details = f"\nAdditional details about the company/role:\n{custom_details}\n" if custom_details else ""
    return COVER_LETTER_HUMAN.format(
        cv_text=cv_text,
        job_description=job_description,
        custom_details=details,
    )


def build_job_offers_prompt(cv_text: str, grounded: bool = False) -> str:
    """검색 그라운딩을 쓸 때는 JSON 배열 응답 형식을 덧붙임"""
    prompt = JOB_OFFERS_HUMAN.format(cv_text=cv_text)
    if grounded:
        prompt += JOB_OFFERS_SEARCH_INSTRUCTIONS
    return prompt
