"""Client and server classes corresponding to protobuf-defined services."""
import grpc

from protos import store_pb2 as protos_dot_store__pb2


class StoreServiceStub(object):
    """Item and order store used by the purchase service.
    """

    def __init__(self, channel):
        """Constructor.

        Args:
            channel: A grpc.Channel.
        """
        self.FindItem = channel.unary_unary(
                '/shop.store.v1.StoreService/FindItem',
                request_serializer=protos_dot_store__pb2.FindItemRequest.SerializeToString,
                response_deserializer=protos_dot_store__pb2.Item.FromString,
                )
        self.DecrementItem = channel.unary_unary(
                '/shop.store.v1.StoreService/DecrementItem',
                request_serializer=protos_dot_store__pb2.DecrementItemRequest.SerializeToString,
                response_deserializer=protos_dot_store__pb2.Item.FromString,
                )
        self.ReserveItem = channel.unary_unary(
                '/shop.store.v1.StoreService/ReserveItem',
                request_serializer=protos_dot_store__pb2.ReserveItemRequest.SerializeToString,
                response_deserializer=protos_dot_store__pb2.ReserveItemResponse.FromString,
                )
        self.CreateOrder = channel.unary_unary(
                '/shop.store.v1.StoreService/CreateOrder',
                request_serializer=protos_dot_store__pb2.CreateOrderRequest.SerializeToString,
                response_deserializer=protos_dot_store__pb2.Order.FromString,
                )
        self.SaveOrder = channel.unary_unary(
                '/shop.store.v1.StoreService/SaveOrder',
                request_serializer=protos_dot_store__pb2.SaveOrderRequest.SerializeToString,
                response_deserializer=protos_dot_store__pb2.Order.FromString,
                )
        self.GetOrder = channel.unary_unary(
                '/shop.store.v1.StoreService/GetOrder',
                request_serializer=protos_dot_store__pb2.GetOrderRequest.SerializeToString,
                response_deserializer=protos_dot_store__pb2.Order.FromString,
                )


class StoreServiceServicer(object):
    """Item and order store used by the purchase service.
    """

    def FindItem(self, request, context):
        """Missing associated documentation comment in .proto file."""
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')

    def DecrementItem(self, request, context):
        """Unconditional increment by -1; the saved quantity may go negative.
        """
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')

    def ReserveItem(self, request, context):
        """Decrement only if at least one unit is left.
        """
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')

    def CreateOrder(self, request, context):
        """Missing associated documentation comment in .proto file."""
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')

    def SaveOrder(self, request, context):
        """Missing associated documentation comment in .proto file."""
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')

    def GetOrder(self, request, context):
        """Missing associated documentation comment in .proto file."""
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')


def add_StoreServiceServicer_to_server(servicer, server):
    rpc_method_handlers = {
            'FindItem': grpc.unary_unary_rpc_method_handler(
                    servicer.FindItem,
                    request_deserializer=protos_dot_store__pb2.FindItemRequest.FromString,
                    response_serializer=protos_dot_store__pb2.Item.SerializeToString,
            ),
            'DecrementItem': grpc.unary_unary_rpc_method_handler(
                    servicer.DecrementItem,
                    request_deserializer=protos_dot_store__pb2.DecrementItemRequest.FromString,
                    response_serializer=protos_dot_store__pb2.Item.SerializeToString,
            ),
            'ReserveItem': grpc.unary_unary_rpc_method_handler(
                    servicer.ReserveItem,
                    request_deserializer=protos_dot_store__pb2.ReserveItemRequest.FromString,
                    response_serializer=protos_dot_store__pb2.ReserveItemResponse.SerializeToString,
            ),
            'CreateOrder': grpc.unary_unary_rpc_method_handler(
                    servicer.CreateOrder,
                    request_deserializer=protos_dot_store__pb2.CreateOrderRequest.FromString,
                    response_serializer=protos_dot_store__pb2.Order.SerializeToString,
            ),
            'SaveOrder': grpc.unary_unary_rpc_method_handler(
                    servicer.SaveOrder,
                    request_deserializer=protos_dot_store__pb2.SaveOrderRequest.FromString,
                    response_serializer=protos_dot_store__pb2.Order.SerializeToString,
            ),
            'GetOrder': grpc.unary_unary_rpc_method_handler(
                    servicer.GetOrder,
                    request_deserializer=protos_dot_store__pb2.GetOrderRequest.FromString,
                    response_serializer=protos_dot_store__pb2.Order.SerializeToString,
            ),
    }
    generic_handler = grpc.method_handlers_generic_handler(
            'shop.store.v1.StoreService', rpc_method_handlers)
    server.add_generic_rpc_handlers((generic_handler,))
