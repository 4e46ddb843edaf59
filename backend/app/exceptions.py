"""
Erreurs métier levées par les services.

Chaque erreur porte le code HTTP correspondant ; le handler enregistré dans
app.main les convertit en réponse JSON {"detail": message}.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    status_code = 400


class CapacityExceededError(BadRequestError):
    """La classe a atteint sa capacité maximale."""


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409
