# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiled-in catalog of Aspire hosting resource types and chaining methods.

The tables mirror the public hosting APIs of the Aspire 13.0 NuGet packages.
They are plain values; :mod:`apphostgen.schema.registry` wraps them in a
read-only lookup object.
"""

from __future__ import annotations

from apphostgen.model.types import (
    ApiMethod,
    ChainingMethod,
    CSharpType,
    MethodParameter,
    ParameterConstraints,
    ResourceCategory,
    ResourceTypeDefinition,
)

# ###############
# Public Interface
# ###############

ASPIRE_VERSION = "13.0.0"
"""Package and SDK version every catalog entry targets."""

BUILTIN_PACKAGE = "Aspire.Hosting"
"""The hosting package referenced by the SDK itself; never listed as a directive."""

STRING = CSharpType(name="string", namespace="System", full_name="System.String")
INT = CSharpType(name="int", namespace="System", full_name="System.Int32")
BOOL = CSharpType(name="bool", namespace="System", full_name="System.Boolean")
STRING_ARRAY = CSharpType(name="string[]", namespace="System", full_name="System.String[]")
CONTAINER_LIFETIME = CSharpType(
    name="ContainerLifetime",
    namespace="Aspire.Hosting.ApplicationModel",
    full_name="Aspire.Hosting.ApplicationModel.ContainerLifetime",
)


def resource_builder_type(resource_type_name: str) -> CSharpType:
    """Return the ``IResourceBuilder<T>`` type for *resource_type_name*."""
    return CSharpType(
        name=f"IResourceBuilder<{resource_type_name}>",
        namespace="Aspire.Hosting.ApplicationModel",
        full_name=f"Aspire.Hosting.ApplicationModel.IResourceBuilder<{resource_type_name}>",
    )


# ################
# Catalog
# ################

_DATABASE = ResourceCategory.DATABASE
_CACHE = ResourceCategory.CACHE
_MESSAGING = ResourceCategory.MESSAGING
_AI = ResourceCategory.AI
_COMPUTE = ResourceCategory.COMPUTE
_PROJECT = ResourceCategory.PROJECT
_CONTAINER = ResourceCategory.CONTAINER

_CONSUMERS = (_PROJECT, _CONTAINER, _COMPUTE)
_ALL_BACKENDS = (_DATABASE, _CACHE, _MESSAGING, _AI, _PROJECT, _CONTAINER)
_BACKING_CHAINING = ("WithLifetime", "WithEnvironment", "WithBindMount")
_APP_CHAINING = ("WithReference", "WaitFor", "WithEnvironment", "WithHttpEndpoint", "WithReplicas")

_GENERIC_BUILDER = resource_builder_type("T")
_PORT_RANGE = ParameterConstraints(min_value=1, max_value=65535)


def _name_param(description: str, max_length: int) -> MethodParameter:
    return MethodParameter(
        name="name",
        type=STRING,
        is_required=True,
        description=description,
        constraints=ParameterConstraints(must_be_identifier=True, min_length=1, max_length=max_length),
    )


def _port_param(default: int, description: str) -> MethodParameter:
    return MethodParameter(
        name="port",
        type=INT,
        is_required=False,
        default_value=default,
        description=description,
        constraints=_PORT_RANGE,
    )


def _path_param(name: str, description: str) -> MethodParameter:
    return MethodParameter(
        name=name,
        type=STRING,
        is_required=True,
        description=description,
        constraints=ParameterConstraints(must_be_valid_path=True),
    )


def _builder(name: str, description: str, returns: str, *parameters: MethodParameter, **extra: object) -> ApiMethod:
    return ApiMethod(
        name=name,
        description=description,
        parameters=parameters,
        return_type=resource_builder_type(returns),
        **extra,
    )


def _chaining(
    name: str,
    description: str,
    available_for: tuple[ResourceCategory, ...],
    *parameters: MethodParameter,
    multiple: bool = True,
) -> ChainingMethod:
    return ChainingMethod(
        name=name,
        description=description,
        parameters=parameters,
        return_type=_GENERIC_BUILDER,
        extension_type="IResourceBuilder<T>",
        available_for=available_for,
        can_be_called_multiple_times=multiple,
    )


def _resource_param(description: str) -> MethodParameter:
    return MethodParameter(
        name="resource",
        type=CSharpType(
            name="IResourceBuilder<T>",
            namespace="Aspire.Hosting.ApplicationModel",
            full_name="Aspire.Hosting.ApplicationModel.IResourceBuilder<T>",
        ),
        is_required=True,
        description=description,
    )


def _endpoint_params(default_name: str, *, with_env: bool) -> tuple[MethodParameter, ...]:
    params = [
        MethodParameter(
            name="port", type=INT, is_required=False, description="The host port to expose", constraints=_PORT_RANGE
        ),
        MethodParameter(
            name="targetPort",
            type=INT,
            is_required=False,
            description="The container port to map to",
            constraints=_PORT_RANGE,
        ),
        MethodParameter(
            name="name", type=STRING, is_required=False, default_value=default_name, description="The endpoint name"
        ),
    ]
    if with_env:
        params.append(
            MethodParameter(
                name="env", type=STRING, is_required=False, description="Environment variable for port injection"
            )
        )
    return tuple(params)


CHAINING_METHODS: dict[str, ChainingMethod] = {
    method.name: method
    for method in (
        _chaining(
            "WithReference",
            "Adds a reference to another resource, making it available via dependency injection",
            _CONSUMERS,
            _resource_param("The resource to reference"),
        ),
        _chaining(
            "WaitFor",
            "Waits for the specified resource to be ready before starting this resource",
            _CONSUMERS,
            _resource_param("The resource to wait for"),
        ),
        _chaining(
            "WithLifetime",
            "Sets the container lifetime for the resource",
            (_DATABASE, _CACHE, _MESSAGING),
            MethodParameter(
                name="lifetime",
                type=CONTAINER_LIFETIME,
                is_required=True,
                description="The container lifetime",
                constraints=ParameterConstraints(allowed_values=("Persistent", "Session")),
            ),
            multiple=False,
        ),
        _chaining(
            "WithEnvironment",
            "Adds an environment variable to the resource",
            _CONSUMERS,
            MethodParameter(
                name="name",
                type=STRING,
                is_required=True,
                description="The environment variable name",
                constraints=ParameterConstraints(pattern=r"^[A-Z_][A-Z0-9_]*$"),
            ),
            MethodParameter(name="value", type=STRING, is_required=True, description="The environment variable value"),
        ),
        _chaining(
            "WithHttpEndpoint",
            "Exposes an HTTP endpoint for the resource",
            _CONSUMERS,
            *_endpoint_params("http", with_env=True),
        ),
        _chaining(
            "WithHttpsEndpoint",
            "Exposes an HTTPS endpoint for the resource",
            _CONSUMERS,
            *_endpoint_params("https", with_env=False),
        ),
        _chaining(
            "WithBindMount",
            "Adds a bind mount to the container",
            (_CONTAINER, _DATABASE, _CACHE, _MESSAGING),
            _path_param("source", "The source path on the host"),
            _path_param("target", "The target path in the container"),
        ),
        _chaining(
            "WithReplicas",
            "Sets the number of replicas for the resource",
            _CONSUMERS,
            MethodParameter(
                name="count",
                type=INT,
                is_required=True,
                description="The number of replicas",
                constraints=ParameterConstraints(min_value=1, max_value=100),
            ),
            multiple=False,
        ),
        _chaining("WithManagementPlugin", "Enables the RabbitMQ management UI", (_MESSAGING,), multiple=False),
        _chaining("WithKafkaUI", "Adds a Kafka UI container for the broker", (_MESSAGING,), multiple=False),
        _chaining("WithJetStream", "Enables JetStream on the NATS server", (_MESSAGING,), multiple=False),
    )
}
"""Chaining methods by name."""


def _database(
    type_id: str,
    display_name: str,
    package: str,
    builder_name: str,
    server_type: str,
    database_type: str,
    max_length: int,
    port: int,
    connection_string: str,
) -> ResourceTypeDefinition:
    return ResourceTypeDefinition(
        id=type_id,
        display_name=display_name,
        category=_DATABASE,
        package=package,
        package_version=ASPIRE_VERSION,
        builder_method=_builder(
            builder_name,
            f"Adds a {display_name} server resource to the application",
            server_type,
            _name_param(f"The name of the {display_name} server resource", max_length),
            _port_param(port, f"The host port for the {display_name} server"),
        ),
        child_resource_methods=(
            ApiMethod(
                name="AddDatabase",
                description=f"Adds a database to the {display_name} server",
                parameters=(_name_param("The name of the database", max_length),),
                return_type=resource_builder_type(database_type),
                extension_type=f"IResourceBuilder<{server_type}>",
            ),
        ),
        available_chaining_methods=_BACKING_CHAINING,
        builder_return_type=resource_builder_type(server_type),
        connection_string_format=connection_string,
        can_be_referenced_by=_CONSUMERS,
    )


def _service(
    type_id: str,
    display_name: str,
    category: ResourceCategory,
    package: str,
    builder_name: str,
    resource_type: str,
    port: int,
    connection_string: str,
    extra_chaining: tuple[str, ...] = (),
) -> ResourceTypeDefinition:
    return ResourceTypeDefinition(
        id=type_id,
        display_name=display_name,
        category=category,
        package=package,
        package_version=ASPIRE_VERSION,
        builder_method=_builder(
            builder_name,
            f"Adds a {display_name} resource to the application",
            resource_type,
            _name_param(f"The name of the {display_name} resource", 63),
            _port_param(port, f"The host port for the {display_name} server"),
        ),
        available_chaining_methods=_BACKING_CHAINING + extra_chaining,
        builder_return_type=resource_builder_type(resource_type),
        connection_string_format=connection_string,
        can_be_referenced_by=_CONSUMERS,
    )


def _app(
    type_id: str,
    display_name: str,
    package: str,
    builder: ApiMethod,
    resource_type: str,
    chaining: tuple[str, ...],
    can_connect_to: tuple[ResourceCategory, ...] = _ALL_BACKENDS,
    category: ResourceCategory = _PROJECT,
) -> ResourceTypeDefinition:
    return ResourceTypeDefinition(
        id=type_id,
        display_name=display_name,
        category=category,
        package=package,
        package_version=ASPIRE_VERSION,
        builder_method=builder,
        available_chaining_methods=chaining,
        builder_return_type=resource_builder_type(resource_type),
        can_connect_to=can_connect_to,
    )


RESOURCE_DEFINITIONS: tuple[ResourceTypeDefinition, ...] = (
    # Databases
    _database(
        "postgres",
        "PostgreSQL",
        "Aspire.Hosting.PostgreSQL",
        "AddPostgres",
        "PostgresServerResource",
        "PostgresDatabaseResource",
        63,
        5432,
        "Host={host};Port={port};Database={database};Username={username};Password={password}",
    ),
    _database(
        "sqlserver",
        "SQL Server",
        "Aspire.Hosting.SqlServer",
        "AddSqlServer",
        "SqlServerServerResource",
        "SqlServerDatabaseResource",
        128,
        1433,
        "Server={host},{port};Database={database};User Id={username};Password={password};TrustServerCertificate=True",
    ),
    _database(
        "mongodb",
        "MongoDB",
        "Aspire.Hosting.MongoDB",
        "AddMongoDB",
        "MongoDBServerResource",
        "MongoDBDatabaseResource",
        63,
        27017,
        "mongodb://{username}:{password}@{host}:{port}",
    ),
    _database(
        "mysql",
        "MySQL",
        "Aspire.Hosting.MySql",
        "AddMySql",
        "MySqlServerResource",
        "MySqlDatabaseResource",
        64,
        3306,
        "Server={host};Port={port};Database={database};User={username};Password={password}",
    ),
    _database(
        "oracle",
        "Oracle Database",
        "Aspire.Hosting.Oracle",
        "AddOracle",
        "OracleDatabaseServerResource",
        "OracleDatabaseResource",
        128,
        1521,
        "Data Source={host}:{port}/{database};User Id={username};Password={password}",
    ),
    # Caches
    _service("redis", "Redis", _CACHE, "Aspire.Hosting.Redis", "AddRedis", "RedisResource", 6379, "{host}:{port}"),
    _service("valkey", "Valkey", _CACHE, "Aspire.Hosting.Valkey", "AddValkey", "ValkeyResource", 6379, "{host}:{port}"),
    _service("garnet", "Garnet", _CACHE, "Aspire.Hosting.Garnet", "AddGarnet", "GarnetResource", 6379, "{host}:{port}"),
    # Messaging
    _service(
        "rabbitmq",
        "RabbitMQ",
        _MESSAGING,
        "Aspire.Hosting.RabbitMQ",
        "AddRabbitMQ",
        "RabbitMQServerResource",
        5672,
        "amqp://{username}:{password}@{host}:{port}",
        ("WithManagementPlugin",),
    ),
    _service(
        "kafka",
        "Apache Kafka",
        _MESSAGING,
        "Aspire.Hosting.Kafka",
        "AddKafka",
        "KafkaServerResource",
        9092,
        "{host}:{port}",
        ("WithKafkaUI",),
    ),
    _service(
        "nats",
        "NATS",
        _MESSAGING,
        "Aspire.Hosting.Nats",
        "AddNats",
        "NatsServerResource",
        4222,
        "nats://{host}:{port}",
        ("WithJetStream",),
    ),
    # AI
    ResourceTypeDefinition(
        id="openai",
        display_name="OpenAI",
        category=_AI,
        package=BUILTIN_PACKAGE,
        package_version=ASPIRE_VERSION,
        builder_method=_builder(
            "AddConnectionString",
            "Adds a connection string for OpenAI API",
            "ConnectionStringResource",
            _name_param("The name of the connection string resource", 128),
        ),
        builder_return_type=resource_builder_type("ConnectionStringResource"),
        can_be_referenced_by=_CONSUMERS,
    ),
    ResourceTypeDefinition(
        id="ollama",
        display_name="Ollama",
        category=_AI,
        package="Aspire.Hosting.Ollama",
        package_version=ASPIRE_VERSION,
        builder_method=_builder(
            "AddOllama",
            "Adds an Ollama resource to the application",
            "OllamaResource",
            _name_param("The name of the Ollama resource", 63),
            _port_param(11434, "The host port for the Ollama server"),
        ),
        child_resource_methods=(
            ApiMethod(
                name="AddModel",
                description="Adds a model to the Ollama server",
                parameters=(
                    MethodParameter(name="name", type=STRING, is_required=True, description="The name of the model"),
                ),
                return_type=resource_builder_type("OllamaModelResource"),
                extension_type="IResourceBuilder<OllamaResource>",
            ),
        ),
        available_chaining_methods=_BACKING_CHAINING,
        builder_return_type=resource_builder_type("OllamaResource"),
        connection_string_format="http://{host}:{port}",
        can_be_referenced_by=_CONSUMERS,
    ),
    # Projects
    _app(
        "dotnet-project",
        "C# Project",
        BUILTIN_PACKAGE,
        _builder(
            "AddProject",
            "Adds a .NET project to the distributed application",
            "ProjectResource",
            _name_param("The name of the project resource", 128),
            generic_constraints=("TProject : IProjectMetadata, new()",),
        ),
        "ProjectResource",
        ("WithReference", "WaitFor", "WithEnvironment", "WithHttpEndpoint", "WithHttpsEndpoint", "WithReplicas"),
    ),
    _app(
        "node-app",
        "Node.js App",
        "Aspire.Hosting.NodeJs",
        _builder(
            "AddNodeApp",
            "Adds a Node.js application to the distributed application",
            "NodeAppResource",
            _name_param("The name of the Node.js resource", 128),
            _path_param("scriptPath", "The path to the Node.js project directory"),
            MethodParameter(name="args", type=STRING_ARRAY, is_required=False, description="Arguments to pass to npm"),
        ),
        "NodeAppResource",
        _APP_CHAINING,
    ),
    _app(
        "vite-app",
        "Vite App",
        "Aspire.Hosting.NodeJs",
        _builder(
            "AddViteApp",
            "Adds a Vite application to the distributed application",
            "ViteAppResource",
            _name_param("The name of the Vite resource", 128),
            _path_param("workingDirectory", "The path to the Vite project directory"),
        ),
        "ViteAppResource",
        _APP_CHAINING,
        can_connect_to=(_PROJECT, _AI, _CONTAINER),
    ),
    _app(
        "python-app",
        "Python App",
        "Aspire.Hosting.Python",
        _builder(
            "AddPythonApp",
            "Adds a Python application to the distributed application",
            "PythonAppResource",
            _name_param("The name of the Python resource", 128),
            _path_param("projectDirectory", "The path to the Python project directory"),
            MethodParameter(
                name="scriptPath",
                type=STRING,
                is_required=True,
                description="The name of the Python script to run",
                constraints=ParameterConstraints(pattern=r"\.py$"),
            ),
        ),
        "PythonAppResource",
        _APP_CHAINING,
    ),
    # Containers
    _app(
        "container",
        "Container",
        BUILTIN_PACKAGE,
        _builder(
            "AddContainer",
            "Adds a custom container to the distributed application",
            "ContainerResource",
            _name_param("The name of the container resource", 128),
            MethodParameter(
                name="image",
                type=STRING,
                is_required=True,
                description="The container image name",
                constraints=ParameterConstraints(pattern=r"^[a-z0-9]+([._\-/][a-z0-9]+)*$"),
            ),
            MethodParameter(
                name="tag",
                type=STRING,
                is_required=False,
                default_value="latest",
                description="The container image tag",
            ),
        ),
        "ContainerResource",
        (
            "WithReference",
            "WaitFor",
            "WithEnvironment",
            "WithHttpEndpoint",
            "WithHttpsEndpoint",
            "WithBindMount",
            "WithReplicas",
        ),
        category=_CONTAINER,
    ),
)
"""Every resource type, in catalog order."""

CSHARP_KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked",
        "class", "const", "continue", "decimal", "default", "delegate", "do", "double", "else",
        "enum", "event", "explicit", "extern", "false", "finally", "fixed", "float", "for",
        "foreach", "goto", "if", "implicit", "in", "int", "interface", "internal", "is", "lock",
        "long", "namespace", "new", "null", "object", "operator", "out", "override", "params",
        "private", "protected", "public", "readonly", "ref", "return", "sbyte", "sealed", "short",
        "sizeof", "stackalloc", "static", "string", "struct", "switch", "this", "throw", "true",
        "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using", "virtual",
        "void", "volatile", "while",
    }
)  # fmt: skip
"""Reserved C# keywords that cannot be used as plain identifiers."""
