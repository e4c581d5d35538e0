"""
NeuroNotes Backend: API Routes Package
========================================

Route Inventory:
    - notes.py:      GET/POST        /api/notes
                     GET/PATCH/DELETE /api/notes/{id}
    - functions.py:  POST/OPTIONS    /functions/v1/suggest-tags
                     POST/OPTIONS    /functions/v1/summarize-note
    - health.py:     GET             /health

Routes stay thin: extract request data, call a service, shape the response.
"""
