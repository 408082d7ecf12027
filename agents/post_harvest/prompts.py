"""
Prompts for the Post-Harvest Agent
"""

SYSTEM_PROMPT = "You are a post-harvest expert. Always respond with valid JSON."

USER_PROMPT_TEMPLATE = """Analyze post-harvest risk for {crop_type} stored using {storage_type} storage in {region}.
{trigger_note}
Current Conditions:
- Temperature: {temperature}°C
- Humidity: {humidity}%

Provide:
1. Spoilage Risk (Low/Medium/High)
2. Estimated Safe Storage Time (days)
3. Specific moisture/pest warnings
4. Logistics recommendation ("Move to cold chain", "Sell immediately", etc.)

Respond ONLY in JSON:
{{
  "risk": "High",
  "safe_days": 5,
  "warnings": [],
  "logistics_action": ""
}}"""

TRIGGER_NOTE_TEMPLATE = "\nThis analysis was requested because of: {trigger_reason}\n"

# Shown when the region has no climate readings yet
UNKNOWN_READING = "unknown"
