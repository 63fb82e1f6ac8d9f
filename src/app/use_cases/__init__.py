"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, verification and password flows
- profile/: Profile read/update and avatar upload
- access/: Request admission (guard chain)
- accounts/: Out-of-band account provisioning
"""
