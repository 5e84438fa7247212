"""
Go-live orchestration.

Includes:
- settings: Settings Synchronizer (merge, resolve, prefill, validate).
- auth: Auth Coordinator and the platform merge onboarding flow.
- errors: Error Classifier and Recovery Router.
- go_live: Go-live state machine and the GoLiveService facade.
"""
