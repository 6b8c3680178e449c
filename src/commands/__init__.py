from .cup_draft import CupDraftCommands

__all__ = ['CupDraftCommands']
