"""
NeuroNotes Backend: Middleware Package
========================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can be correlated
    2. Logging captures status and duration on the way back out
    3. CORS answers browser preflights for the notes API
"""
