"""
Narrative: optional prose on top of computed results.

Modules
-------
base          : NarrativeGenerator protocol + NarrativeUnavailableError.
prompts       : system instructions, the history JSON schema and the
                executive / comparison / history prompt builders.
openai_client : OpenAINarrativeGenerator (httpx, chat-completions API).
service       : NarrativeService, which never raises to its caller.
"""
