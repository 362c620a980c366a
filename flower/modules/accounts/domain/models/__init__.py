"""
Accounts Domain Models

- Account: identity-provider account with the chosen username as display name
- UsernameEntry: username directory entry keyed by the lowercased name
- UserRecord: private record written at registration
- Profile: public username record
"""
