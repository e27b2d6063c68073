"""Verify all modules can be imported without errors."""
import pytest

# All tests in this module are pure import checks - mark as unit tests
pytestmark = pytest.mark.unit


def test_core_module_imports():
    """Import core backend modules to catch bad import paths."""
    import backend.main
    import backend.auth
    import backend.settings


def test_core_logic_imports():
    """Import core logic modules."""
    import backend.core.challenge_service
    import backend.core.gamification
    import backend.core.workout_tracker
    import backend.core.write_queue


def test_service_imports():
    """Import service modules."""
    import backend.services.chat_service
    import backend.services.notifications
    import backend.services.workout_sessions
    import backend.ai.chat_completion
    import backend.ai.client_factory


def test_domain_imports():
    """Import pure domain modules."""
    import domain.models
    import domain.workout.sequencer
    import domain.workout.state
    import domain.workout.timer


def test_infrastructure_imports():
    """Import adapters for the datastore and payments provider."""
    import infrastructure.db
    import infrastructure.payments.stripe_gateway


def test_app_starts():
    """Verify FastAPI app can be instantiated."""
    from backend.main import app
    assert app is not None
    assert hasattr(app, 'routes')
