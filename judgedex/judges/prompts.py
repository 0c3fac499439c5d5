JUDGE_ANALYST_SYSTEM_PROMPT = (
    "You are a legal AI assistant that analyzes judge profiles and provides comprehensive "
    "insights about their ruling patterns, experience, and courtroom expectations. "
    "You always answer with a single JSON object and nothing else."
)

JUDGE_ANALYSIS_USER_PROMPT = """Analyze the following judge data and create a comprehensive profile in JSON format. Include:

1. Basic information (name, circuit, tier, appointed by, years of service, alma mater)
2. Ruling tendencies by category with percentages
3. Recent cases summary
4. Overall summary
5. Courtroom expectations

Judge Data:
Name: {name}
Positions: {positions}
Recent Opinions: {opinions}
{supplementary}
Return a JSON object with this structure:
{{
  "id": "{judge_id}",
  "name": "Full Name",
  "circuit": "Court Name",
  "tier": "federal/state/local",
  "appointedBy": "President Name",
  "yearsOfService": "X years",
  "almaMater": "Law School",
  "rulingTendencies": [
    {{"category": "Civil Procedure", "percentage": 65, "description": "..."}}
  ],
  "recentCases": [
    {{"id": 123, "title": "Case Name", "date": "2024-01-01", "description": "..."}}
  ],
  "summary": "Overall summary...",
  "courtroomExpectations": "What to expect...",
  "success": true,
  "lastUpdated": "{timestamp}"
}}"""
