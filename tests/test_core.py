"""Unit tests for core infrastructure components."""
import pytest
from unittest.mock import Mock

from core.container import Container
from core.error_handler import handle_exceptions, log_execution_time
from core.exceptions import ParsingError, WorkoutLogException
from core.result import Failure, Success


class TestContainer:
    """Tests for dependency injection container."""

    def test_register_and_get_service(self):
        # Arrange
        container = Container()
        instance = Mock()

        # Act
        container.register("mock_service", instance)
        result = container.get("mock_service")

        # Assert
        assert result is instance

    def test_register_factory(self):
        # Arrange
        container = Container()
        factory = Mock(return_value="created_instance")

        # Act
        container.register_factory("factory_service", factory)
        result1 = container.get("factory_service")
        result2 = container.get("factory_service")

        # Assert
        factory.assert_called_once()  # Should only be called once (cached)
        assert result1 == "created_instance"
        assert result1 is result2  # Same instance (cached)

    def test_factory_not_called_until_needed(self):
        # Arrange
        container = Container()
        factory = Mock(return_value="lazy")

        # Act
        container.register_factory("lazy_service", factory)

        # Assert
        factory.assert_not_called()
        assert container.has("lazy_service")
        assert container.built() == []

    def test_built_lists_instantiated_services(self):
        container = Container()
        container.register("ready", Mock())
        container.register_factory("lazy", Mock())

        assert container.built() == ["ready"]

    def test_has_service(self):
        # Arrange
        container = Container()
        container.register("existing", Mock())

        # Assert
        assert container.has("existing")
        assert not container.has("non_existing")

    def test_get_nonexistent_raises_error(self):
        # Arrange
        container = Container()

        # Assert
        with pytest.raises(KeyError):
            container.get("nonexistent")

    def test_clear(self):
        # Arrange
        container = Container()
        container.register("service1", Mock())
        container.register_factory("service2", Mock())

        # Act
        container.clear()

        # Assert
        assert not container.has("service1")
        assert not container.has("service2")


class TestResult:
    """Tests for Result type."""

    def test_success_creation(self):
        # Act
        result = Success(42)

        # Assert
        assert result.is_success()
        assert not result.is_failure()
        assert result.unwrap() == 42

    def test_success_unwrap_or(self):
        assert Success(42).unwrap_or(0) == 42

    def test_success_map(self):
        # Act
        mapped = Success(5).map(lambda x: x * 2)

        # Assert
        assert mapped.is_success()
        assert mapped.unwrap() == 10

    def test_success_map_captures_error(self):
        mapped = Success(0).map(lambda x: 1 / x)

        assert mapped.is_failure()
        assert isinstance(mapped.error, ZeroDivisionError)

    def test_failure_creation(self):
        # Act
        error = ParsingError("could not parse")
        result = Failure(error)

        # Assert
        assert result.is_failure()
        assert not result.is_success()
        assert result.error is error
        assert result.message == "could not parse"

    def test_failure_unwrap_raises(self):
        result = Failure(ValueError("test error"))

        with pytest.raises(ValueError):
            result.unwrap()

    def test_failure_unwrap_or(self):
        assert Failure(ValueError("error")).unwrap_or(99) == 99

    def test_failure_map(self):
        # Act
        result = Failure(ValueError("error"))
        mapped = result.map(lambda x: x * 2)

        # Assert
        assert mapped.is_failure()
        assert mapped is result


class TestExceptions:
    def test_domain_errors_share_base(self):
        assert issubclass(ParsingError, WorkoutLogException)
        assert issubclass(WorkoutLogException, Exception)


class TestErrorHandlingDecorators:
    """Tests for error handling decorators."""

    def test_handle_exceptions_success(self):
        # Arrange
        @handle_exceptions(default_return=None)
        def test_func():
            return "success"

        # Act
        result = test_func()

        # Assert
        assert result == "success"

    def test_handle_exceptions_with_error(self):
        # Arrange
        @handle_exceptions(default_return="default")
        def test_func():
            raise ValueError("test error")

        # Act
        result = test_func()

        # Assert
        assert result == "default"

    def test_handle_exceptions_reraise(self):
        # Arrange
        @handle_exceptions(reraise=True)
        def test_func():
            raise ValueError("test error")

        # Assert
        with pytest.raises(ValueError):
            test_func()

    def test_handle_exceptions_logs_with_message(self):
        # Arrange
        mock_logger = Mock()

        @handle_exceptions(logger_instance=mock_logger, message="Cleanup failed")
        def test_func():
            raise RuntimeError("boom")

        # Act
        test_func()

        # Assert
        mock_logger.opt.return_value.error.assert_called_once_with("Cleanup failed: boom")

    def test_log_execution_time(self):
        # Arrange
        mock_logger = Mock()

        @log_execution_time(logger_instance=mock_logger, level="info")
        def test_func(x):
            return x + 1

        # Act
        result = test_func(1)

        # Assert
        assert result == 2
        level, message = mock_logger.log.call_args[0]
        assert level == "INFO"
        assert message.startswith("test_func executed in")

    def test_log_execution_time_logs_on_error(self):
        mock_logger = Mock()

        @log_execution_time(logger_instance=mock_logger)
        def test_func():
            raise ValueError("error")

        with pytest.raises(ValueError):
            test_func()
        mock_logger.log.assert_called_once()
