"""
Helios Intel - Default Report Templates

Seeded into the template store once per storage. {{prospectName}} and
{{userCriteria}} are substituted by TemplateStore.render_prompt().
"""

SEED_TEMPLATES = [
    {
        "name": "The 'Why You, Why Now?' Brief",
        "prompt": """Act as a senior sales intelligence analyst. Decide whether "{{prospectName}}" is a timely and valuable prospect right now.

Review recent news, financial reports and strategic announcements.

1.  **Identify the most compelling trigger event** from the last 6 months, such as a new executive hire, a funding round, a strategic initiative, a difficult quarter or a major launch.
2.  **Write a one-paragraph hypothesis** connecting that trigger to a business challenge our healthcare data and analytics solutions address.
3.  **Finish with a 'Timeliness Score' from 1 to 10** and a short justification.

Use clear markdown headings.""",
        "isDefault": True,
        "job": "Quickly qualify a prospect based on recent, actionable trigger events.",
        "icon": "TargetIcon",
    },
    {
        "name": "Ideal Customer Profile (ICP) Fit Scorecard",
        "prompt": """Act as a market research analyst. Evaluate "{{prospectName}}" against our Ideal Customer Profile.

Use Google Search to find evidence for each criterion.

**ICP Criteria:**
---
{{userCriteria}}
---

For each criterion:
1.  State the criterion.
2.  Mark the prospect "Match" or "No Match".
3.  Give a brief justification and the source URL.

**Conclusion:**
Give an overall ICP Fit Score (e.g. "4/5 criteria met") and one paragraph on why "{{prospectName}}" is a strong or weak fit.

Format the output as a markdown document with clear headings.""",
        "isDefault": True,
        "job": "Systematically qualify a prospect against your specific ICP criteria.",
        "icon": "ChecklistIcon",
    },
    {
        "name": "Multi-Channel Outreach Sequence",
        "prompt": """Act as an expert sales copywriter for busy healthcare executives.

Write a 3-touch, multi-channel outreach sequence for a key persona at "{{prospectName}}".

**Persona:** [Specify Persona, e.g. Chief Information Officer]

**Touch 1: LinkedIn Connection Request (Day 1)**
- At most 300 characters, referencing a specific recent announcement or interview.

**Touch 2: Value-Focused Email (Day 1, after connection)**
- Under 150 words, leading with a hypothesis about a likely challenge.
- Pose one insightful question about that challenge.
- End with a soft call-to-action.

**Touch 3: Follow-Up Email (Day 3)**
- Offer a relevant, non-gated resource tied to the original hypothesis.

Use markdown headings for each touchpoint.""",
        "isDefault": True,
        "job": "Generate a ready-to-use, multi-step outreach campaign for a specific persona.",
        "icon": "EmailIcon",
    },
    {
        "name": "Pain Point Hypothesis",
        "prompt": """Act as a sales strategist preparing a rep for a discovery call with "{{prospectName}}".

From their business model, recent news and market position, identify their **top 3 likely challenges** around data, analytics or regulatory compliance.

For each challenge:
1.  **State a "Pain Hypothesis".**
2.  **Write two open-ended "Validation Questions"** a rep could ask without sounding like a vendor.

Format the output as a markdown list.""",
        "isDefault": True,
        "job": "Equip sales reps with insightful questions for consultative discovery calls.",
        "icon": "ChatBubbleIcon",
    },
    {
        "name": "Competitive Landmine Map",
        "prompt": """Act as a competitive intelligence strategist.

Assume the primary competitor in a deal with "{{prospectName}}" is [Competitor Name].

From public information (reviews, news, customer forums), identify 3 strategic weaknesses of that competitor.

For each weakness:
1.  **State the weakness.**
2.  **Write a "Landmine Question"** to ask "{{prospectName}}" that surfaces the weakness without naming the competitor.

Use markdown headings for each landmine.""",
        "isDefault": True,
        "job": "Strategically de-position a key competitor during the sales cycle.",
        "icon": "BombIcon",
    },
    {
        "name": "Champion Enablement Kit",
        "prompt": """Act as a senior product marketing manager. Write an internal business case our champion at "{{prospectName}}" can use to sell our solution internally.

Write it as their [Director of Analytics] proposing to their [VP of IT or CFO]. Include:
1.  **Executive Summary**
2.  **The Problem:** 2-3 bullets on current challenges and their business impact.
3.  **Proposed Solution:** a jargon-free summary.
4.  **Expected Business Outcomes:** 3-4 outcomes.
5.  **Required Investment:** "[Insert Proposed Cost]".

Keep it to one page of markdown that is easy to copy and adapt.""",
        "isDefault": True,
        "job": "Create a ready-to-share internal business case for your champion.",
        "icon": "UsersIcon",
    },
]
