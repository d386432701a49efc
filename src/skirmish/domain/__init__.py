"""Pure combat domain: models, stat derivation, skills and resolution."""
