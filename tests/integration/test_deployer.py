import zipfile
import pytest
from containerless.MANAGERS.containerless_deployer import ContainerlessDeployer, DeploymentState
from containerless.MANAGERS.lifecycle_dispatcher import LifecycleCommand, RecordingCommandEmitter
from containerless.MODELS.archive import Archive, ArchiveDeployment, DescriptorDeployment
from containerless.MODELS.cube import Cube, Binding
from containerless.MODELS.deployer_config import DeployerConfiguration
from containerless.REGISTRY.cube_registry import InMemoryCubeRegistry
from containerless.errors import (
    ConfigurationError,
    CubeNotFoundError,
    InvalidBuildLocationError,
    MissingBuildConfigError,
    TemplateNotFoundError,
    UnsupportedDeploymentError,
)

TEMPLATE = "FROM x\nADD ${deployableFilename} /app\n"


class BindingEmitter(RecordingCommandEmitter):
    """Records commands and binds the cube to an address on start, like a runtime would."""

    def emit(self, command, cube):
        super().emit(command, cube)
        if command == LifecycleCommand.START:
            cube.binding = Binding(ip="172.17.0.2")


@pytest.fixture
def build_dir(tmp_path):
    directory = tmp_path / "build"
    directory.mkdir()
    (directory / "DockerfileTemplate").write_text(TEMPLATE)
    return directory


def make_deployer(configuration, emitter=None, name="tomcat"):
    registry = InMemoryCubeRegistry([Cube(name=name, configuration=configuration)])
    config = DeployerConfiguration(containerless_docker="tomcat", embedded_port=8080, build_directory_cleanup=False)
    emitter = emitter or BindingEmitter()
    return ContainerlessDeployer(config, registry, emitter), emitter


def test_deploy_end_to_end(build_dir):
    deployer, emitter = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}})

    endpoint = deployer.deploy(Archive(name="test.war").add("index.html", "hello"))

    assert (build_dir / "Dockerfile").read_text() == "FROM x\nADD test.war /app\n"
    with zipfile.ZipFile(build_dir / "test.war") as zf:
        assert zf.read("index.html") == b"hello"
    assert emitter.commands == [(LifecycleCommand.CREATE, "tomcat"), (LifecycleCommand.START, "tomcat")]
    assert (endpoint.host, endpoint.port) == ("172.17.0.2", 8080)
    assert deployer.state == DeploymentState.ENDPOINT_READY


def test_deploy_wrapped_archive_keeps_other_placeholders(build_dir):
    (build_dir / "DockerfileTemplate").write_text("FROM ${BASE}\nADD ${deployableFilename} /app\n")
    deployer, _ = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}})

    deployer.deploy(ArchiveDeployment(archive=Archive(name="app.war")))

    assert (build_dir / "Dockerfile").read_text() == "FROM ${BASE}\nADD app.war /app\n"


def test_redeploy_keeps_previous_dockerfile(build_dir):
    (build_dir / "Dockerfile").write_text("FROM previous\n")
    deployer, _ = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}})

    deployer.deploy(Archive(name="test.war"))

    assert (build_dir / "Dockerfile.old").read_text() == "FROM previous\n"
    assert (build_dir / "Dockerfile").read_text() == "FROM x\nADD test.war /app\n"


@pytest.mark.parametrize("configuration, error", [
    ({}, MissingBuildConfigError),
    ({"buildImage": {}}, MissingBuildConfigError),
    ({"buildImage": {"dockerfileLocation": "/definitely/not/here"}}, InvalidBuildLocationError),
])
def test_deploy_configuration_errors_emit_nothing(configuration, error):
    deployer, emitter = make_deployer(configuration)

    with pytest.raises(error):
        deployer.deploy(Archive(name="test.war"))

    assert emitter.commands == []
    assert deployer.state == DeploymentState.FAILED


def test_deploy_missing_template_emits_nothing(tmp_path):
    deployer, emitter = make_deployer({"buildImage": {"dockerfileLocation": str(tmp_path)}})

    with pytest.raises(TemplateNotFoundError):
        deployer.deploy(Archive(name="test.war"))
    assert emitter.commands == []


def test_deploy_unknown_cube(build_dir):
    deployer, emitter = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}}, name="other")

    with pytest.raises(CubeNotFoundError) as exc:
        deployer.deploy(Archive(name="test.war"))
    assert isinstance(exc.value, ConfigurationError)
    assert emitter.commands == []


def test_deploy_runtime_error_propagates(build_dir):
    emitter = RecordingCommandEmitter(fail_on={LifecycleCommand.START})
    deployer, _ = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}}, emitter=emitter)

    with pytest.raises(RuntimeError, match="start"):
        deployer.deploy(Archive(name="test.war"))
    assert emitter.commands == [(LifecycleCommand.CREATE, "tomcat")]
    assert deployer.state == DeploymentState.FAILED


def test_deploy_create_failure_never_starts(build_dir):
    emitter = RecordingCommandEmitter(fail_on={LifecycleCommand.CREATE})
    deployer, _ = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}}, emitter=emitter)

    with pytest.raises(RuntimeError, match="create"):
        deployer.deploy(Archive(name="test.war"))
    assert emitter.commands == []
    assert deployer.state == DeploymentState.FAILED


def test_undeploy(build_dir):
    deployer, emitter = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}})

    deployer.undeploy(Archive(name="test.war"))

    assert emitter.commands == [(LifecycleCommand.STOP, "tomcat"), (LifecycleCommand.DESTROY, "tomcat")]
    assert deployer.state == DeploymentState.DESTROYED


def test_undeploy_unknown_cube_is_noop():
    deployer, emitter = make_deployer({}, name="other")

    deployer.undeploy(Archive(name="test.war"))

    assert emitter.commands == []
    assert deployer.state == DeploymentState.UNDEPLOYED


def test_descriptor_deployments_unsupported(build_dir):
    deployer, emitter = make_deployer({"buildImage": {"dockerfileLocation": str(build_dir)}})
    descriptor = DescriptorDeployment(descriptor_name="web.xml")

    with pytest.raises(UnsupportedDeploymentError):
        deployer.deploy(descriptor)
    with pytest.raises(UnsupportedDeploymentError):
        deployer.undeploy(descriptor)
    assert emitter.commands == []


def test_default_protocol(build_dir):
    deployer, _ = make_deployer({})
    assert deployer.default_protocol == "Servlet 3.0"
