# -*- coding: utf-8 -*-
# Protocol buffer messages for protos/store.proto.
#
# The file descriptor is declared field by field below and registered with the
# default descriptor pool, then the message classes are built exactly as protoc's
# Python output does. Running
#     python -m grpc_tools.protoc -I. --python_out=. --grpc_python_out=. protos/store.proto
# produces an equivalent module; keep the declaration in step with store.proto.
"""Generated protocol buffer code."""
from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_sym_db = _symbol_database.Default()

_PACKAGE = 'shop.store.v1'
_FIELD = _descriptor_pb2.FieldDescriptorProto


def _message(file_proto, name, fields):
    message = file_proto.message_type.add(name=name)
    for number, (field_name, field_type, type_name) in enumerate(fields, start=1):
        field = message.field.add(
            name=field_name,
            number=number,
            label=_FIELD.LABEL_OPTIONAL,
            type=field_type,
        )
        if type_name:
            field.type_name = f'.{_PACKAGE}.{type_name}'


def _file_descriptor_proto():
    file_proto = _descriptor_pb2.FileDescriptorProto(
        name='protos/store.proto',
        package=_PACKAGE,
        syntax='proto3',
    )
    string, int32, boolean, message = _FIELD.TYPE_STRING, _FIELD.TYPE_INT32, _FIELD.TYPE_BOOL, _FIELD.TYPE_MESSAGE

    _message(file_proto, 'Item', [
        ('name', string, None),
        ('price', string, None),
        ('quantity_available', int32, None),
    ])
    _message(file_proto, 'Order', [
        ('object_id', string, None),
        ('name', string, None),
        ('email', string, None),
        ('address', string, None),
        ('city_state', string, None),
        ('zip', string, None),
        ('size', string, None),
        ('item', string, None),
        ('fulfilled', boolean, None),
        ('charged', boolean, None),
        ('payment_reference', string, None),
    ])
    _message(file_proto, 'FindItemRequest', [('name', string, None)])
    _message(file_proto, 'DecrementItemRequest', [('name', string, None)])
    _message(file_proto, 'ReserveItemRequest', [('name', string, None)])
    _message(file_proto, 'ReserveItemResponse', [
        ('reserved', boolean, None),
        ('item', message, 'Item'),
    ])
    _message(file_proto, 'CreateOrderRequest', [('order', message, 'Order')])
    _message(file_proto, 'SaveOrderRequest', [('order', message, 'Order')])
    _message(file_proto, 'GetOrderRequest', [('object_id', string, None)])

    service = file_proto.service.add(name='StoreService')
    for method, request, response in (
        ('FindItem', 'FindItemRequest', 'Item'),
        ('DecrementItem', 'DecrementItemRequest', 'Item'),
        ('ReserveItem', 'ReserveItemRequest', 'ReserveItemResponse'),
        ('CreateOrder', 'CreateOrderRequest', 'Order'),
        ('SaveOrder', 'SaveOrderRequest', 'Order'),
        ('GetOrder', 'GetOrderRequest', 'Order'),
    ):
        service.method.add(
            name=method,
            input_type=f'.{_PACKAGE}.{request}',
            output_type=f'.{_PACKAGE}.{response}',
        )
    return file_proto


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_file_descriptor_proto().SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, 'protos.store_pb2', _globals)
