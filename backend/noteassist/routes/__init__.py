# Routes package init
"""
NoteAssist Backend — API Routes Package
=========================================

Route Inventory:
    - notes.py:   GET    /notes              (list caller's notes)
                  GET    /notes/{id}         (get one note)
                  POST   /notes              (create)
                  PATCH  /notes/{id}         (partial update)
                  DELETE /notes/{id}         (delete)
    - assist.py:  POST   /notes/ai/summarize
                  POST   /notes/ai/fix-grammar
                  POST   /notes/ai/auto-tag
    - health.py:  GET    /health

Routes stay thin: they extract request data, call a service, and shape
the response. Business rules live in noteassist.services.
"""
