"""
Content generation.

Components:
- client.py: ContentGenerator (Groq via the OpenAI SDK) + task plan cache
- models.py: TaskPlan, CoachingStats, Generated
- prompts.py: system/user prompts
- offline.py: deterministic fallback content
"""
