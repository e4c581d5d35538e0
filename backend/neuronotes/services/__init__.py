"""
NeuroNotes Backend: Services Layer
====================================

Service Inventory:
    - NoteAssistant (abstract): AI features behind the two functions
    - AIGatewayService: NoteAssistant over an OpenAI-compatible gateway
    - AuthService: bearer token → user, via the hosted auth service
    - NoteService: user-scoped note CRUD

Services accept plain values and DB sessions and know nothing about HTTP,
so they are unit-tested without a server.
"""
