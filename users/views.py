from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from utils.exceptions import AuthError
from .authentication import OptionalJWTAuthentication
from .serializers import CredentialsSerializer, SignOutSerializer, PrincipalSerializer
from .session import SessionProvider


def _session_response(session, status_code):
    return Response({
        'principal': PrincipalSerializer(session.current_principal).data,
        'access': session.tokens['access'],
        'refresh': session.tokens['refresh'],
    }, status=status_code)


class SignUpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = CredentialsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        session = SessionProvider()
        try:
            session.sign_up(serializer.validated_data['email'], serializer.validated_data['password'])
        except AuthError as e:
            return Response({'error': e.message, 'code': e.code}, status=status.HTTP_400_BAD_REQUEST)
        return _session_response(session, status.HTTP_201_CREATED)


class SignInView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = CredentialsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        session = SessionProvider()
        try:
            session.sign_in(serializer.validated_data['email'], serializer.validated_data['password'])
        except AuthError as e:
            return Response({'error': e.message, 'code': e.code}, status=status.HTTP_401_UNAUTHORIZED)
        return _session_response(session, status.HTTP_200_OK)


class SignOutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = SignOutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = SessionProvider.for_request(request)
        try:
            session.sign_out(serializer.validated_data.get('refresh') or None)
        except AuthError as e:
            return Response({'error': e.message, 'code': e.code}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SessionView(APIView):
    """Current principal, or null for an anonymous request or an expired session"""
    permission_classes = [AllowAny]
    authentication_classes = [OptionalJWTAuthentication]

    def get(self, request):
        session = SessionProvider.for_request(request)
        principal = session.current_principal
        return Response({
            'principal': PrincipalSerializer(principal).data if principal else None,
            'loading': session.loading,
        })
