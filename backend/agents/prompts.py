"""
Helios Intel - Agent Prompts

Prompt builders for every AI operation. Kept apart from the agents so the
wording can change without touching pipeline logic.
"""

from constants import (
    JSON_START_MARKER,
    JSON_END_MARKER,
    PRODUCT_SUITE_DESCRIPTION,
    PUBLIC_SOURCES_INSTRUCTION,
)


def name_normalization_prompt(user_input: str) -> str:
    return (
        f'A user typed the organization name "{user_input}". Reply with the '
        "organization's full, official, canonical name only, on a single line, "
        "with no quotes, explanation or punctuation beyond the name itself. "
        "If you do not recognize it, repeat the input exactly."
    )


def prospect_profile_prompt(prospect_name: str) -> str:
    return f"""Generate a detailed prospect profile for the healthcare organization "{prospect_name}". The report must be well-structured and include the following sections:
  - **Executive Summary:** A brief overview of the organization's size, focus, and current market position.
  - **Key Personnel:** C-suite executives and relevant department heads.
  - **Stated Challenges & Initiatives:** Problems they are trying to solve or projects they are undertaking.
  - **Technology Footprint:** Current technology vendors, EHR systems or data platforms they use.
  - **Recent News & Financials:** The most important recent events and a summary of their financial health.

Use markdown for formatting.{PUBLIC_SOURCES_INSTRUCTION}

After the markdown report, append a single JSON object between the markers {JSON_START_MARKER} and {JSON_END_MARKER} with these keys (omit any you cannot support with sources):
  "executiveSummary" (string), "financialSummary" (string),
  "keyStats" ({{"companySize", "annualRevenue", "primaryFocus"}}),
  "orgChartData" ([{{"name", "title", "bio", "linkedin"}}]),
  "challengesAndInitiatives" ([{{"type": "challenge" | "initiative", "description"}}]),
  "technologyFootprint" ([string]),
  "recentNews" ([{{"date", "headline", "uri", "isImpactful"}}])"""


DOMAIN_SECTIONS = {
    "Quality": "Current Performance (Stars, HEDIS, CAHPS)",
    "Risk": "Risk Program Footprint",
    "Care Models": "Key Care Delivery Programs",
    "Pharmacy": "Pharmacy Strategy Overview",
    "Hospital Networks": "Provider Network Overview",
    "Employer Groups": "Commercial Offerings",
}


def domain_intelligence_prompt(prospect_name: str, domain: str, report_context: str) -> str:
    overview_heading = DOMAIN_SECTIONS.get(domain, "Current Performance")
    return f"""You are a healthcare industry analyst preparing a {domain} intelligence briefing on "{prospect_name}".

Background report:
---
{report_context}
---

Structure the briefing with exactly these bolded headings, each on its own line:
**{overview_heading}**
**Inferred Pain Points**
**Strategic Opportunities**

Under each heading write 3-5 concise markdown bullet points.{PUBLIC_SOURCES_INSTRUCTION}"""


def swot_prompt(company_name: str) -> str:
    return f"""Conduct a comprehensive SWOT analysis for the company "{company_name}". Use Google Search to gather up-to-date information.
For each of the four sections provide 3-5 distinct bullet points with brief explanations.

The output must be markdown with this structure:
**Strengths**
- Point

**Weaknesses**
- Point

**Opportunities**
- Point

**Threats**
- Point"""


def outreach_email_prompt(prospect_name: str, report_content: str, persona: str, tone: str) -> str:
    return f"""You are an expert sales copywriter specializing in the healthcare industry. Draft a personalized outreach email.

**Prospect:** {prospect_name}
**Target Persona:** {persona}
**Desired Tone:** {tone}

**Background Intelligence Report:**
---
{report_content}
---

The email must:
- Have an attention-grabbing subject line.
- Reference a specific detail from the report to show you've done your research.
- Articulate a value proposition for a likely pain point of the persona.
- End with a clear, low-friction call-to-action.

Return a single JSON object with two keys: "subject" (string) and "body" (string)."""


def meeting_briefing_prompt(prospect_name: str, report_content: str, attendees: str, objective: str) -> str:
    return f"""You are a sales strategy assistant preparing a pre-meeting briefing note.

**Prospect:** {prospect_name}
**Meeting Attendees:** {attendees}
**Meeting Objective:** {objective}

**Background Intelligence Report:**
---
{report_content}
---

Write a concise briefing with:
1.  **Key Talking Points:** 3-4 bullets tailored to the attendees and objective.
2.  **Anticipated Questions:** 2-3 questions the prospect might ask.
3.  **Strategic Goals:** The primary and secondary goal for this meeting.

Format the output using markdown."""


def talking_points_prompt(challenge: str, prospect_name: str, prospect_context: str) -> str:
    return f"""You are a product marketing and sales strategist for Helios, a B2B healthcare data and analytics company.
{PRODUCT_SUITE_DESCRIPTION}

A sales representative is analyzing the prospect "{prospect_name}". Their intelligence report:
---
{prospect_context}
---

The specific challenge or initiative to address is: "{challenge}"

1.  Decide whether the Helios suite addresses this point.
2.  Write 2-3 concise talking points connecting a Helios product to the need.
3.  If nothing fits, state that this is a product gap.
4.  For a gap, outline a new product or feature that could solve it.

Return a single JSON object with keys:
  "isGap" (boolean), "talkingPoints" (markdown string),
  "gapAnalysis" (one sentence), "newSolutionIdea" (string, only when isGap is true)"""


def watchlist_scan_prompt(name: str, item_type: str) -> str:
    kind = "competitor" if item_type == "COMPETITOR" else "prospect"
    return f"""Search for significant news from the last 7 days about the {kind} "{name}" (leadership changes, funding, mergers, major contracts, regulatory actions, product launches).

Return a single JSON object:
  {{"hasAlert": boolean, "title": string, "summary": string, "category": string, "uri": string}}
Set "hasAlert" to false and omit the other keys when nothing significant happened."""


def lead_generation_prompt(vertical: str, location: str, keywords: str) -> str:
    return f"""Act as an expert market research analyst for the healthcare data industry and identify potential sales leads.
The ideal customer profile is:
- Industry Vertical: {vertical}
- Location: {location or "Any"}
- Keywords/Pain Points: {keywords or "None given"}

Use Google Search to find 5 to 10 companies that match this profile. For each company give a one-sentence reason why it is a good fit, tailored to the keywords. Do not list more than 10 companies.

Return a single JSON object:
  {{"leads": [{{"companyName": string, "reason": string}}]}}"""


def rfp_analysis_prompt(rfp_text: str) -> str:
    return f"""You are an assistant for analyzing RFPs, RFIs and security questionnaires for Helios, a healthcare data company.
{PRODUCT_SUITE_DESCRIPTION}

For each distinct requirement in the document below:
1.  **Requirement:** State it clearly and concisely.
2.  **Suggested Answer:** A suggested answer, or the next step to get one (e.g. "Consult the security team regarding our SOC 2 Type II report.").
3.  **Status:** "ANSWERED" if you can answer directly, "GAP" if it is outside current capabilities or needs specialist input.

Return a single JSON object:
  {{"analysis": [{{"requirement": string, "suggestedAnswer": string, "status": "ANSWERED" | "GAP"}}]}}

---
DOCUMENT TEXT:
{rfp_text}"""


def market_trends_prompt(vertical: str) -> str:
    return f"""Using Google Search, identify the 3-5 most important recent market trends for the "{vertical}" sector of the healthcare industry. For each trend give a concise title, a brief summary and a source URI.

Return a single JSON object:
  {{"trends": [{{"title": string, "summary": string, "uri": string}}]}}"""


def market_pulse_summary_prompt(vertical: str) -> str:
    return f"""Provide an executive summary of the key news and market insights for the "{vertical}" healthcare vertical. Use Google Search to find the most relevant information.
Group it by time horizon:
- This Year: 2-3 developments that have defined the year so far.
- Last Quarter: 2-3 significant events, reports or shifts.
- Last Month: 2-3 notable news items.
- Last Week: 1-2 of the most recent, impactful items.
- Looking Ahead: 2-3 predictions for the next 6-12 months.

Return a single JSON object with keys "thisYear", "lastQuarter", "lastMonth", "lastWeek" and "lookingAhead", each an array of concise bullet-point strings."""


PERSONA_INSTRUCTIONS = {
    "Sales Development Rep": (
        "Focus on immediate outreach opportunities: conversation starters, timely pain points "
        "for cold calls or emails, and sub-sectors showing momentum that are ripe for prospecting."
    ),
    "Account Executive": (
        "Focus on strategic points for discovery calls and demos: market shifts to align solutions "
        "with, long-term client needs from the Looking Ahead trends, and competitive angles."
    ),
    "Sales Leadership": (
        "Focus on high-level strategy: major headwinds or tailwinds, new segments or territories "
        "to explore, and competitive threats the team must prepare for."
    ),
    "Market Analyst": (
        "Focus on areas for deeper investigation: surprising or contradictory trends, emerging "
        "technologies or regulations that need a full report, and data points to track."
    ),
}


def personalized_insights_prompt(summary_json: str, persona: str) -> str:
    return f"""You are an expert sales and market intelligence strategist. The user's role is: **{persona}**.

Using the market pulse summary below, write a concise "What You Need to Know" briefing for this role.

**Instructions:** {PERSONA_INSTRUCTIONS[persona]} Provide 3-4 bullet points.

Format the output as markdown bullet points only, with no title or introduction.

**Market Pulse Summary Data:**
```json
{summary_json}
```"""


def playbook_assist_prompt(context: str, field_label: str) -> str:
    return f"""You are a senior healthcare sales strategist helping a representative fill in a deal playbook.

Known details:
---
{context}
---

Write the "{field_label}" section of the playbook: 3-5 concise, specific markdown bullet points. Do not repeat the known details verbatim and do not add a heading."""


def template_report_prompt(rendered_template: str) -> str:
    return f"{rendered_template}\n\nUse markdown for formatting.{PUBLIC_SOURCES_INSTRUCTION}"
