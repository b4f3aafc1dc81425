#!/usr/bin/env python3

# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
IAM Provisioning Deployment Script

Builds and deploys the IAM provisioning stack (groups, users, temporary
password secret, email parameters and the LogUserCredentials notifier).

Usage:
    python publish.py
    python publish.py --stack-name iam-provisioning-dev --log-level DEBUG
"""

import argparse
import re
import subprocess
import sys

import boto3
from botocore.exceptions import ClientError

DEFAULT_STACK_NAME = "iam-provisioning"

# IAM is global; CloudTrail delivers its management events to EventBridge in us-east-1 only
IAM_EVENTS_REGION = "us-east-1"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def log_info(msg):
    print(f"{Colors.OKBLUE}ℹ {msg}{Colors.ENDC}")


def log_success(msg):
    print(f"{Colors.OKGREEN}✓ {msg}{Colors.ENDC}")


def log_error(msg):
    print(f"{Colors.FAIL}✗ {msg}{Colors.ENDC}")


def log_warning(msg):
    print(f"{Colors.WARNING}⚠ {msg}{Colors.ENDC}")


def run_command(cmd):
    """Run shell command and return result."""
    log_info(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=True)
    return result.returncode == 0


def validate_stack_name(stack_name):
    """
    Validate a CloudFormation stack name.

    Rules:
    - Letters, numbers and hyphens only
    - Must start with a letter
    - At most 128 characters

    Args:
        stack_name: String to validate

    Returns:
        bool: True if valid

    Raises:
        ValueError: If stack name is invalid with descriptive message
    """
    if not stack_name:
        raise ValueError("Stack name cannot be empty")

    if len(stack_name) > 128:
        raise ValueError("Stack name must be at most 128 characters long")

    if not stack_name[0].isalpha():
        raise ValueError("Stack name must start with a letter")

    for char in stack_name:
        if not (char.isascii() and (char.isalnum() or char == '-')):
            raise ValueError(
                f"Stack name contains invalid character '{char}'. "
                "Only letters, numbers, and hyphens are allowed"
            )

    return True


def validate_region(region):
    """
    Validate AWS region using regex pattern.

    AWS region format: 2-letter country code, direction, number
    Examples: us-east-1, eu-west-2, ap-southeast-3

    Args:
        region: AWS region string (e.g., 'us-east-1')

    Returns:
        bool: True if valid

    Raises:
        ValueError: If region format is invalid
    """
    if not region:
        raise ValueError("Region cannot be empty")

    pattern = r'^[a-z]{2}-[a-z]+-\d+$'

    if not re.match(pattern, region):
        raise ValueError(
            f"Invalid AWS region format: {region}. "
            "Expected format like 'us-east-1', 'eu-west-2'"
        )

    return True


def check_python_version():
    """
    Check if Python 3.12+ is available.

    Raises:
        SystemExit: If Python version is insufficient
    """
    version_info = sys.version_info

    if version_info[0] < 3 or (version_info[0] == 3 and version_info[1] < 12):
        log_error("Python 3.12+ is required")
        log_info(f"Current version: Python {version_info[0]}.{version_info[1]}.{version_info[2]}")
        sys.exit(1)

    log_success(f"Found Python {version_info[0]}.{version_info[1]}.{version_info[2]}")
    return True


def check_aws_cli():
    """
    Check if AWS CLI is installed and configured.

    Returns:
        bool: True if AWS CLI is configured with valid credentials

    Raises:
        SystemExit: If AWS CLI not found or not configured
    """
    log_info("Checking AWS CLI configuration...")

    aws_result = subprocess.run(['aws', '--version'],
                               capture_output=True,
                               text=True)

    if aws_result.returncode != 0:
        log_error("AWS CLI not found")
        log_info("Install AWS CLI: https://aws.amazon.com/cli/")
        sys.exit(1)

    creds_result = subprocess.run(['aws', 'sts', 'get-caller-identity'],
                                 capture_output=True,
                                 text=True)

    if creds_result.returncode != 0:
        log_error("AWS credentials not configured")
        log_info("Run: aws configure")
        sys.exit(1)

    log_success("AWS CLI configured")
    return True


def check_sam_cli():
    """
    Check if AWS SAM CLI is installed.

    Raises:
        SystemExit: If SAM CLI not found
    """
    log_info("Checking SAM CLI...")

    sam_result = subprocess.run(['sam', '--version'],
                               capture_output=True,
                               text=True)

    if sam_result.returncode != 0:
        log_error("SAM CLI not found")
        log_info("Install SAM CLI: https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/install-sam-cli.html")
        sys.exit(1)

    log_success(f"Found {sam_result.stdout.strip()}")
    return True


def sam_build():
    """Build SAM application."""
    log_info("Building SAM application...")
    run_command(["sam", "build"])
    log_success("SAM build complete")


def handle_failed_stack(stack_name, region):
    """
    Check if stack exists and is in an unrecoverable state.

    Only deletes stacks that cannot be updated (creation failures like
    ROLLBACK_COMPLETE). UPDATE_ROLLBACK_COMPLETE can be updated and is left alone.

    Args:
        stack_name: CloudFormation stack name
        region: AWS region

    Returns:
        bool: True if stack was deleted or doesn't exist, False if stack exists and is healthy

    Raises:
        OSError: If the stack can't be inspected or deletion fails
    """
    cf_client = boto3.client('cloudformation', region_name=region)

    try:
        response = cf_client.describe_stacks(StackName=stack_name)
    except ClientError as e:
        error_code = e.response['Error']['Code']

        if error_code == 'ValidationError' and 'does not exist' in str(e):
            log_info(f"Stack '{stack_name}' does not exist, proceeding with fresh deployment")
            return True

        raise OSError(f"Failed to check stack status: {e}") from e

    stack_status = response['Stacks'][0]['StackStatus']

    if stack_status not in ['ROLLBACK_COMPLETE', 'CREATE_FAILED', 'DELETE_FAILED', 'ROLLBACK_FAILED']:
        return False

    log_warning(f"Stack '{stack_name}' is in {stack_status} state")
    log_info(f"Deleting failed stack '{stack_name}'...")

    try:
        cf_client.delete_stack(StackName=stack_name)

        waiter = cf_client.get_waiter('stack_delete_complete')
        log_info("Waiting for stack deletion to complete...")
        waiter.wait(
            StackName=stack_name,
            WaiterConfig={
                'Delay': 15,
                'MaxAttempts': 40
            }
        )
    except Exception as e:
        log_error(f"Stack deletion timed out: {e}")
        log_error(f"  Check status with: aws cloudformation describe-stacks --stack-name {stack_name}")
        raise OSError(f"Cannot proceed while stack '{stack_name}' may still be deleting") from e

    log_success(f"Stack '{stack_name}' deleted successfully")
    return True


def build_deploy_command(stack_name, region, log_level="INFO"):
    """Assemble the sam deploy command line."""
    return [
        "sam", "deploy",
        "--stack-name", stack_name,
        "--region", region,
        "--capabilities", "CAPABILITY_NAMED_IAM", "CAPABILITY_AUTO_EXPAND",
        "--resolve-s3",
        "--no-confirm-changeset",
        "--no-fail-on-empty-changeset",
        "--parameter-overrides", f"LogLevel={log_level}",
    ]


def sam_deploy(stack_name, region, log_level="INFO"):
    """
    Deploy the SAM application.

    Args:
        stack_name: CloudFormation stack name
        region: AWS region
        log_level: LOG_LEVEL for the notifier function

    Returns:
        str: CloudFormation stack name
    """
    log_info(f"Deploying stack '{stack_name}' to {region}...")
    run_command(build_deploy_command(stack_name, region, log_level))
    log_success(f"Deployment of stack '{stack_name}' complete")
    return stack_name


def get_stack_outputs(stack_name, region="us-east-1"):
    """Get CloudFormation stack outputs."""
    log_info(f"Fetching stack outputs for {stack_name}...")

    cf_client = boto3.client('cloudformation', region_name=region)

    try:
        response = cf_client.describe_stacks(StackName=stack_name)
    except ClientError as e:
        log_error(f"Failed to get stack outputs: {e}")
        return {}

    outputs = response['Stacks'][0].get('Outputs', [])
    return {item['OutputKey']: item['OutputValue'] for item in outputs}


def print_outputs(outputs, stack_name, region):
    """Print stack outputs in a nice format."""
    print(f"\n{Colors.HEADER}{'=' * 60}{Colors.ENDC}")
    print(f"{Colors.HEADER}Deployment Complete! (Stack: {stack_name}){Colors.ENDC}")
    print(f"{Colors.HEADER}{'=' * 60}{Colors.ENDC}\n")

    print(f"{Colors.BOLD}Stack Outputs:{Colors.ENDC}\n")

    for key, value in outputs.items():
        print(f"{Colors.BOLD}{key}:{Colors.ENDC} {value}")

    print(f"\n{Colors.HEADER}{'=' * 60}{Colors.ENDC}\n")

    if outputs.get('LogUserCredentialsFunctionArn'):
        print(f"{Colors.OKGREEN}Next Steps:{Colors.ENDC}")
        print("1. Open CloudWatch Logs group /aws/lambda/LogUserCredentials")
        print(f"   aws logs tail /aws/lambda/LogUserCredentials --region {region}")
        print("2. Hand each user their email and temporary password")
        print("3. Users must reset the password on first sign-in")

    print()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Deploy the IAM provisioning stack",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python publish.py
  python publish.py --stack-name iam-provisioning-dev --log-level DEBUG
        """
    )

    parser.add_argument(
        "--stack-name",
        default=DEFAULT_STACK_NAME,
        help=f"CloudFormation stack name (default: {DEFAULT_STACK_NAME})"
    )

    parser.add_argument(
        "--region",
        default=IAM_EVENTS_REGION,
        help="AWS region (default: us-east-1). IAM CreateUser events are only delivered in us-east-1."
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=LOG_LEVELS,
        help="Log level for the LogUserCredentials function (default: INFO)"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main execution function."""
    args = parse_args(argv)

    try:
        print(f"\n{Colors.HEADER}{'=' * 60}{Colors.ENDC}")
        print(f"{Colors.HEADER}IAM Provisioning Deployment{Colors.ENDC}")
        print(f"{Colors.HEADER}{'=' * 60}{Colors.ENDC}\n")

        log_info("Validating inputs...")
        try:
            validate_stack_name(args.stack_name)
            validate_region(args.region)
        except ValueError as e:
            log_error(str(e))
            sys.exit(1)

        if args.region != IAM_EVENTS_REGION:
            log_warning(f"Region '{args.region}' selected, but IAM CreateUser events are only delivered to EventBridge in {IAM_EVENTS_REGION}.")
            log_warning("Users and groups will be created, but LogUserCredentials will never be invoked.")
            response = input(f"{Colors.WARNING}Continue anyway? (y/N): {Colors.ENDC}").strip().lower()
            if response != 'y':
                log_info(f"Deployment cancelled. Use --region {IAM_EVENTS_REGION}.")
                sys.exit(0)

        log_success("All inputs validated")
        log_info(f"Stack Name: {args.stack_name}")
        log_info(f"Region: {args.region}")

        log_info("Checking prerequisites...")
        check_python_version()
        check_aws_cli()
        check_sam_cli()
        log_success("All prerequisites met")

        sam_build()

        try:
            handle_failed_stack(args.stack_name, args.region)
        except OSError as e:
            log_error(f"Failed to handle existing stack: {e}")
            sys.exit(1)

        stack_name = sam_deploy(args.stack_name, args.region, args.log_level)

        outputs = get_stack_outputs(stack_name, args.region)
        print_outputs(outputs, stack_name, args.region)

        log_success("Deployment complete!")

    except subprocess.CalledProcessError as e:
        log_error(f"Command failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        log_warning("\nDeployment cancelled by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
