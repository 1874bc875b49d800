"""Application error taxonomy: data, validation, notification and unknown errors.

Every error raised inside the app is an AppError subclass. Equality is structural
(same class, same kind, same message) so errors can be compared in tests and
matched by the UI.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional


class AppError(Exception):
    kind: Optional[Enum] = None
    message: Optional[str] = None

    @property
    def description(self) -> str:
        return self.message or ""

    @property
    def recovery_suggestion(self) -> str:
        return "Veuillez réessayer ou contacter le support"

    def _key(self):
        return (type(self), self.kind, self.message)

    def __eq__(self, other):
        if not isinstance(other, AppError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        if self.kind is None:
            return f"{type(self).__name__}({self.message!r})"
        if self.message is None:
            return f"{type(self).__name__}({self.kind.name})"
        return f"{type(self).__name__}({self.kind.name}, {self.message!r})"


# --- Data errors ---------------------------------------------------------
class DataErrorKind(Enum):
    FETCH_FAILED = "fetch_failed"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"
    STORE_ERROR = "store_error"
    STORE_FATAL_ERROR = "store_fatal_error"
    NOT_FOUND = "not_found"


_DATA_TEXTS = {
    DataErrorKind.FETCH_FAILED: ("Impossible de charger les données",
                                 "Vérifiez votre connexion et réessayez"),
    DataErrorKind.SAVE_FAILED: ("Impossible de sauvegarder",
                                "Vérifiez les données saisies et réessayez"),
    DataErrorKind.DELETE_FAILED: ("Impossible de supprimer",
                                  "Réessayez la suppression"),
    DataErrorKind.STORE_ERROR: ("Erreur de base de données: {message}",
                                "Redémarrez l'application"),
    DataErrorKind.STORE_FATAL_ERROR: (
        "Erreur critique de la base de données. Les données sont temporairement stockées en mémoire.",
        "Les données seront perdues au redémarrage. Contactez le support si le problème persiste."),
    DataErrorKind.NOT_FOUND: ("Produit introuvable",
                              "Actualisez la liste des produits"),
}


class DataError(AppError):
    def __init__(self, kind: DataErrorKind, message: Optional[str] = None):
        if kind is DataErrorKind.STORE_ERROR and message is None:
            message = ""
        self.kind = kind
        self.message = message
        super().__init__(self.description)

    @property
    def description(self) -> str:
        return _DATA_TEXTS[self.kind][0].format(message=self.message or "")

    @property
    def recovery_suggestion(self) -> str:
        return _DATA_TEXTS[self.kind][1]

    @classmethod
    def fetch_failed(cls):
        return cls(DataErrorKind.FETCH_FAILED)

    @classmethod
    def save_failed(cls):
        return cls(DataErrorKind.SAVE_FAILED)

    @classmethod
    def delete_failed(cls):
        return cls(DataErrorKind.DELETE_FAILED)

    @classmethod
    def store_error(cls, message: str):
        return cls(DataErrorKind.STORE_ERROR, message)

    @classmethod
    def store_fatal_error(cls):
        return cls(DataErrorKind.STORE_FATAL_ERROR)

    @classmethod
    def not_found(cls):
        return cls(DataErrorKind.NOT_FOUND)


# --- Validation errors ---------------------------------------------------
class ValidationErrorKind(Enum):
    EMPTY_NAME = "empty_name"
    INVALID_QUANTITY = "invalid_quantity"
    PAST_EXPIRATION_DATE = "past_expiration_date"
    EMPTY_LOT_NUMBER = "empty_lot_number"
    INVALID_CATEGORY = "invalid_category"
    INVALID_LOCATION = "invalid_location"


_VALIDATION_TEXTS = {
    ValidationErrorKind.EMPTY_NAME: ("Le nom du produit est requis",
                                     "Saisissez un nom pour le produit"),
    ValidationErrorKind.INVALID_QUANTITY: ("La quantité doit être supérieure à 0",
                                           "Saisissez une quantité valide"),
    ValidationErrorKind.PAST_EXPIRATION_DATE: ("La date d'expiration ne peut pas être dans le passé",
                                               "Choisissez une date future"),
    ValidationErrorKind.EMPTY_LOT_NUMBER: ("Le numéro de lot est requis",
                                           "Saisissez ou scannez un numéro de lot"),
    ValidationErrorKind.INVALID_CATEGORY: ("Catégorie invalide",
                                           "Sélectionnez une catégorie valide"),
    ValidationErrorKind.INVALID_LOCATION: ("Emplacement invalide",
                                           "Sélectionnez un emplacement valide"),
}


class ValidationError(AppError):
    def __init__(self, kind: ValidationErrorKind):
        self.kind = kind
        self.message = None
        super().__init__(self.description)

    @property
    def description(self) -> str:
        return _VALIDATION_TEXTS[self.kind][0]

    @property
    def recovery_suggestion(self) -> str:
        return _VALIDATION_TEXTS[self.kind][1]


# --- Notification errors -------------------------------------------------
class NotificationErrorKind(Enum):
    PERMISSION_DENIED = "permission_denied"
    SCHEDULING_FAILED = "scheduling_failed"
    INVALID_CONTENT = "invalid_content"


_NOTIFICATION_TEXTS = {
    NotificationErrorKind.PERMISSION_DENIED: ("Notifications non autorisées",
                                              "Activez les notifications dans les Réglages"),
    NotificationErrorKind.SCHEDULING_FAILED: ("Impossible de programmer la notification",
                                              "Réessayez plus tard"),
    NotificationErrorKind.INVALID_CONTENT: ("Contenu de notification invalide",
                                            "Vérifiez les données du produit"),
}


class NotificationError(AppError):
    def __init__(self, kind: NotificationErrorKind):
        self.kind = kind
        self.message = None
        super().__init__(self.description)

    @property
    def description(self) -> str:
        return _NOTIFICATION_TEXTS[self.kind][0]

    @property
    def recovery_suggestion(self) -> str:
        return _NOTIFICATION_TEXTS[self.kind][1]

    @classmethod
    def permission_denied(cls):
        return cls(NotificationErrorKind.PERMISSION_DENIED)

    @classmethod
    def scheduling_failed(cls):
        return cls(NotificationErrorKind.SCHEDULING_FAILED)

    @classmethod
    def invalid_content(cls):
        return cls(NotificationErrorKind.INVALID_CONTENT)


class UnknownError(AppError):
    def __init__(self, message: str):
        self.kind = None
        self.message = message
        super().__init__(message)


__all__ = [
    'AppError', 'DataError', 'DataErrorKind', 'ValidationError', 'ValidationErrorKind',
    'NotificationError', 'NotificationErrorKind', 'UnknownError'
]
