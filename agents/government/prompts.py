"""
Prompts for the Government Reporting Agent
"""

SYSTEM_PROMPT = "You are a senior agricultural policy analyst. Always respond with valid JSON."

USER_PROMPT_TEMPLATE = """Generate a "National Food Security Policy Brief" for the Ministry of Agriculture, Kenya.

Use the following system data:

Active Alerts: {active_alert_count}
Critical Alerts: {critical_alert_count}
Market Prices: {market_data}
Predictive Analytics: {prediction_data}

Structure the result strictly as valid JSON:
{{
  "executive_summary": "",
  "critical_risks": [],
  "regional_hotspots": [],
  "recommended_interventions": [],
  "economic_impact_estimate": ""
}}"""
