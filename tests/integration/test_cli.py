import zipfile
from click.testing import CliRunner
from containerless.CLI.main import cli


def write_registry(tmp_path, build_dir):
    registry = tmp_path / "cubes.yml"
    registry.write_text(
        "cubes:\n"
        "  tomcat:\n"
        "    buildImage:\n"
        f"      dockerfileLocation: {build_dir}\n"
        "    binding:\n"
        "      ip: 192.168.99.100\n"
    )
    return registry


def write_config(tmp_path):
    config = tmp_path / "containerless.yml"
    config.write_text("containerlessDocker: tomcat\nembeddedPort: 8080\nbuildDirectoryCleanup: false\n")
    return config


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'deploy' in result.output


def test_cli_render(tmp_path):
    (tmp_path / "DockerfileTemplate").write_text("FROM x\nADD ${deployableFilename} /app\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['render', str(tmp_path), 'test.war'])
    assert result.exit_code == 0
    assert result.output == "FROM x\nADD test.war /app\n"
    assert not (tmp_path / "Dockerfile").exists()


def test_cli_render_missing_template(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ['render', str(tmp_path), 'test.war'])
    assert result.exit_code == 1
    assert 'Error: Containerless Docker container requires a file named DockerfileTemplate' in result.output


def test_cli_deploy_and_undeploy(tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    (build_dir / "DockerfileTemplate").write_text("FROM x\nADD ${deployableFilename} /app\n")
    registry = write_registry(tmp_path, build_dir)
    config = write_config(tmp_path)

    archive = tmp_path / "test.war"
    with zipfile.ZipFile(archive, 'w') as zf:
        zf.writestr("index.html", "hello")

    runner = CliRunner()
    result = runner.invoke(cli, ['-c', str(config), '-r', str(registry), 'deploy', str(archive)])
    assert result.exit_code == 0, result.output
    assert 'create   tomcat' in result.output
    assert 'start    tomcat' in result.output
    assert 'http://192.168.99.100:8080' in result.output
    assert (build_dir / "Dockerfile").read_text() == "FROM x\nADD test.war /app\n"
    assert (build_dir / "test.war").exists()

    result = runner.invoke(cli, ['-c', str(config), '-r', str(registry), 'undeploy', 'test.war'])
    assert result.exit_code == 0, result.output
    assert 'stop     tomcat' in result.output
    assert 'destroy  tomcat' in result.output


def test_cli_deploy_missing_registry(tmp_path):
    config = write_config(tmp_path)
    archive_dir = tmp_path / "site"
    archive_dir.mkdir()
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', str(config), '-r', str(tmp_path / "nope.yml"), 'deploy', str(archive_dir)])
    assert result.exit_code == 1
    assert 'not found.' in result.output


def write_build_dir(tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    (build_dir / "DockerfileTemplate").write_text("FROM x\nADD ${deployableFilename} /app\n")
    return build_dir


def write_archive(tmp_path):
    archive = tmp_path / "test.war"
    with zipfile.ZipFile(archive, 'w') as zf:
        zf.writestr("index.html", "hello")
    return archive


def test_cli_deploy_binding_without_ip(tmp_path):
    build_dir = write_build_dir(tmp_path)
    registry = tmp_path / "cubes.yml"
    registry.write_text(
        "cubes:\n"
        "  tomcat:\n"
        "    buildImage:\n"
        f"      dockerfileLocation: {build_dir}\n"
        "    binding:\n"
        "      ports: {8080: 32768}\n"
    )
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', str(write_config(tmp_path)), '-r', str(registry), 'deploy', str(write_archive(tmp_path))])
    assert result.exit_code == 1
    assert 'Error: Cube tomcat has an invalid binding' in result.output


def test_cli_deploy_malformed_config(tmp_path):
    build_dir = write_build_dir(tmp_path)
    registry = write_registry(tmp_path, build_dir)
    config = tmp_path / "containerless.yml"
    config.write_text("containerlessDocker: [unclosed\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', str(config), '-r', str(registry), 'deploy', str(write_archive(tmp_path))])
    assert result.exit_code == 1
    assert 'Error: Containerless configuration is not valid YAML' in result.output


def test_cli_deploy_missing_config(tmp_path):
    build_dir = write_build_dir(tmp_path)
    registry = write_registry(tmp_path, build_dir)
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', str(tmp_path / "nope.yml"), '-r', str(registry), 'deploy', str(write_archive(tmp_path))])
    assert result.exit_code == 1
    assert 'nope.yml not found.' in result.output


def test_cli_deploy_not_a_zip(tmp_path):
    build_dir = write_build_dir(tmp_path)
    registry = write_registry(tmp_path, build_dir)
    archive = tmp_path / "broken.war"
    archive.write_text("not a zip")
    runner = CliRunner()
    result = runner.invoke(cli, ['-c', str(write_config(tmp_path)), '-r', str(registry), 'deploy', str(archive)])
    assert result.exit_code == 1
    assert 'Error:' in result.output
    assert 'is not a zip archive.' in result.output
    assert not (build_dir / "Dockerfile").exists()
