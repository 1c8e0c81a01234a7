from __future__ import annotations

from typing import Optional, TypedDict

# Documents keep the camelCase field names posted by the web forms.


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A registered user as stored in the 'users' collection.

    Fields:
    - id: ObjectId of the document as a hex string
    - name, lastName, phone, email: as submitted
    - password: as submitted (stored in plain text)
    """

    id: str
    name: Optional[str]
    lastName: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    password: Optional[str]


# PUBLIC_INTERFACE
class LoginEntity(TypedDict):
    """A credential record in the 'logins' collection."""

    id: str
    email: Optional[str]
    password: Optional[str]


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A dashboard task as stored in the 'tasks' collection.

    Fields:
    - id: ObjectId of the document as a hex string
    - task: title
    - date, time: free-form strings from the date/time inputs
    - description: free text
    - categoryChoosed: category label
    - completed: completion flag, False at creation
    """

    id: str
    task: Optional[str]
    date: Optional[str]
    description: Optional[str]
    time: Optional[str]
    categoryChoosed: Optional[str]
    completed: bool
