from .models import BatchConnectSpec, SubmitSpec
