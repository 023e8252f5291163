"""tripatch service layer: merge resolution, upsert engines and handlers."""
