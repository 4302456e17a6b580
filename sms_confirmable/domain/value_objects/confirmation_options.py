"""Per-call switches for confirmation flows."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConfirmationOptions:
    """Suppression flags for a single operation. Never persisted.

    Attributes:
        skip_notification: Do not send the confirmation SMS for this call.
            The account still requires confirmation.
        skip_reconfirmation: Apply a phone-number change immediately instead
            of postponing it until the new number is confirmed.
        skip_confirmation: Mark the account as confirmed without issuing or
            consuming a code.
    """

    skip_notification: bool = False
    skip_reconfirmation: bool = False
    skip_confirmation: bool = False


DEFAULT_OPTIONS = ConfirmationOptions()
